#
# Walltime -- Wall-clock time values, zones and formatting
#
# Copyright (c) 2013, Hard Consulting Corporation.
#
# Walltime is free software: you can redistribute it and/or modify it under the
# terms of the GNU General Public License as published by the Free Software
# Foundation, either version 3 of the License, or (at your option) any later
# version.  See the LICENSE file at the top of the source tree.
#
# Walltime is distributed in the hope that it will be useful, but WITHOUT ANY
# WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR
# A PARTICULAR PURPOSE.  See the GNU General Public License for more details.
#

__author__                      = "Perry Kundert"
__email__                       = "perry@hardconsulting.com"
__copyright__                   = "Copyright (c) 2013 Hard Consulting Corporation"
__license__                     = "Dual License: GPLv3 (or later) and Commercial (see LICENSE)"

__all__				= [ "from_components", "from_utc_millis", "UnsupportedConfiguration" ]

import logging

from .zones		import Zone, resolve, environment_descriptor, DAY_MILLIS
from .fields		import days_from_civil, days_in_month
from .instant		import Instant, DomainError, check_nanoseconds, NANOS_PER_MILLI

log				= logging.getLogger( __package__ )


class UnsupportedConfiguration( ValueError ):
    pass


def _check_range( name, value, lo, hi ):
    if not lo <= value <= hi:
        raise DomainError( "Invalid %s %r; must be %d to %d" % ( name, value, lo, hi ))


def from_components( second, minute, hour, day, month, year, nanoseconds=None, is_dst=-1,
                     from_utc=False, utc_offset=None, tz=None, lookup=None ):
    """Build an Instant from local wall-clock calendar components.  The zone used is:

        from_utc			-- UTC (a utc_offset, if any, must be 0)
        utc_offset (int seconds)	-- a fixed offset from UTC; an is_dst hint is irrelevant
        otherwise			-- the Zone tz, the zone tz describes, or the environment's TZ (via lookup)

    In a DST-aware zone, the is_dst hint (-1 unknown, 0 standard time, 1 DST) disambiguates times
    that occur twice during the fall-back transition; unknown prefers standard time.  Times skipped
    by the spring-ahead transition are interpreted using the offset preceding them (or following
    them, if is_dst is 1).

    Raises DomainError for out-of-range components, UnsupportedConfiguration for conflicting or
    non-integer offset inputs, InvalidZoneDescriptor if the zone can't be resolved, and Overflow if
    the result exceeds the signed 64-bit millisecond range.

    """
    if is_dst not in ( -1, 0, 1 ):
        raise DomainError( "Invalid is_dst hint %r; must be -1, 0 or 1" % ( is_dst, ))
    if utc_offset is not None and ( isinstance( utc_offset, bool ) or not isinstance( utc_offset, int )):
        raise UnsupportedConfiguration( "is_dst=%s from_utc=%s utc_offset=%r: offset must be integer seconds" % (
            is_dst, from_utc, utc_offset ))
    if from_utc and utc_offset:
        raise UnsupportedConfiguration( "is_dst=%s from_utc=%s utc_offset=%r: UTC construction with an offset" % (
            is_dst, from_utc, utc_offset ))

    _check_range( "month",	month,	1, 12 )
    _check_range( "day",	day,	1, days_in_month( year, month ))
    _check_range( "hour",	hour,	0, 23 )
    _check_range( "minute",	minute,	0, 59 )
    _check_range( "second",	second,	0, 59 )
    nanoseconds			= 0 if nanoseconds is None else check_nanoseconds( nanoseconds )

    local_millis		= days_from_civil( year, month, day ) * DAY_MILLIS \
                                  + (( hour * 60 + minute ) * 60 + second ) * 1000 \
                                  + nanoseconds // NANOS_PER_MILLI

    if from_utc:
        zone			= Zone.UTC
    elif utc_offset is not None:
        _check_range( "utc_offset", utc_offset, -86399, 86399 )
        zone			= Zone.fixed( utc_offset * 1000 )
        if is_dst != -1:
            log.detail( "Ignoring is_dst=%s for fixed-offset zone %s", is_dst, zone )
    else:
        zone			= tz if isinstance( tz, Zone ) else resolve( environment_descriptor( lookup ) if tz is None else tz )

    offset			= zone.localize( local_millis, is_dst=is_dst == 1 )
    return Instant( local_millis - offset, zone )


def from_utc_millis( seconds, nanoseconds=0 ):
    """The UTC Instant seconds (plus nanoseconds into that second, truncated to milliseconds) after
    the epoch.  Raises Overflow beyond the signed 64-bit millisecond range."""
    check_nanoseconds( nanoseconds )
    return Instant( seconds * 1000 + nanoseconds // NANOS_PER_MILLI, Zone.UTC )
