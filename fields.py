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

__all__				= [ "Fields", "decompose", "breakdown", "env_zone", "zone_label",
                                    "days_from_civil", "civil_from_days", "is_leap", "days_in_month" ]

"""
Calendar decomposition of an Instant into local wall-clock fields.

The civil calendar is the proleptic Gregorian calendar with astronomical year numbering (year 0 is
1 BC), over the entire signed 64-bit millisecond range; zone rules are only consulted within the
years datetime supports, and extend unchanged beyond them.
"""

import collections
import logging
import re

from .zones		import ( resolve, resolve_lenient, environment_descriptor,
                                 format_offset, DAY_MILLIS )

log				= logging.getLogger( __package__ )

HOUR_MILLIS			= 60 * 60 * 1000
MINUTE_MILLIS			= 60 * 1000


class Fields( collections.namedtuple( 'Fields', [
        'second', 'minute', 'hour', 'day', 'month', 'year', 'weekday', 'year_day', 'is_dst', 'zone_label' ] )):
    """The local calendar fields of an Instant, in fixed order.  The weekday counts from Sunday == 0,
    the year_day from January 1 == 1.  The zone_label is None if the zone has no name at that
    instant (only a raw numeric offset, eg. '+09:30' or '-03').

    If detect_dst is False, is_dst is always False (the historical behaviour, where the DST
    designation was never computed).

    """
    __slots__			= ()

    detect_dst			= True


def is_leap( year ):
    return year % 4 == 0 and ( year % 100 != 0 or year % 400 == 0 )


_month_days			= ( 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31 )

def days_in_month( year, month ):
    return 29 if month == 2 and is_leap( year ) else _month_days[month-1]


def days_from_civil( year, month, day ):
    """Days since 1970-01-01 of the given proleptic Gregorian date.  Uses the 400-year era
    decomposition, with the year beginning in March so that the leap day falls last."""
    year		       -= month <= 2
    era				= year // 400
    yoe				= year - era * 400				# [0, 399]
    doy				= ( 153 * ( month + ( -3 if month > 2 else 9 )) + 2 ) // 5 + day - 1
    doe				= yoe * 365 + yoe // 4 - yoe // 100 + doy	# [0, 146096]
    return era * 146097 + doe - 719468


def civil_from_days( days ):
    """The (year, month, day) of the given days since 1970-01-01; the inverse of days_from_civil."""
    days		       += 719468
    era				= days // 146097
    doe				= days - era * 146097
    yoe				= ( doe - doe // 1460 + doe // 36524 - doe // 146096 ) // 365
    doy				= doe - ( 365 * yoe + yoe // 4 - yoe // 100 )
    mp				= ( 5 * doy + 2 ) // 153
    day				= doy - ( 153 * mp + 2 ) // 5 + 1
    month			= mp + ( 3 if mp < 10 else -9 )
    return yoe + era * 400 + ( month <= 2 ), month, day


# A label ending in a raw signed offset (eg. '-03', '+0530', '+09:30') is not a zone name
_numeric_label			= re.compile( r'[-+]\d+(?::\d+)*$' )

def zone_label( offset_millis, abbreviation=None ):
    """Format the zone at some instant as a label; its abbreviation, or its formatted offset.
    Returns None if this label is just a numeric offset."""
    label			= abbreviation or format_offset( offset_millis )
    if _numeric_label.search( label ):
        return None
    return label


def breakdown( instant, tz=None ):
    """Decompose the instant into its local Fields, and the UTC offset in milliseconds in effect.  A
    non-None tz descriptor overrides the instant's own zone."""
    zone			= instant.zone if tz is None else resolve( tz )
    millis			= instant.epoch_millis
    offset,dst,abbreviation	= zone.local( millis )

    days,rem			= divmod( millis + offset, DAY_MILLIS )
    year,month,day		= civil_from_days( days )
    hour,rem			= divmod( rem, HOUR_MILLIS )
    minute,rem			= divmod( rem, MINUTE_MILLIS )

    fields			= Fields(
        second		= rem // 1000,
        minute		= minute,
        hour		= hour,
        day		= day,
        month		= month,
        year		= year,
        weekday		= ( days + 4 ) % 7,		# 1970-01-01 was a Thursday
        year_day	= days - days_from_civil( year, 1, 1 ) + 1,
        is_dst		= bool( dst ) if Fields.detect_dst else False,
        zone_label	= zone_label( offset, abbreviation ),
    )
    log.debug( "%r in %s: %r", instant, zone, fields )
    return fields, offset


def decompose( instant, tz=None ):
    """Decompose the instant into its local calendar Fields.  The tz descriptor (eg. the current value
    of the environment's TZ) is re-resolved on every call, and overrides the instant's zone;
    resolution failure raises InvalidZoneDescriptor."""
    return breakdown( instant, tz )[0]


def env_zone( instant, tz=None, lookup=None ):
    """The zone label of the instant in the environment's zone (the supplied tz descriptor, or the TZ
    obtained via lookup); an unresolvable environment falls back to UTC."""
    if tz is None:
        tz			= environment_descriptor( lookup )
    zone			= instant.zone if tz is None else resolve_lenient( tz )
    offset,_,abbreviation	= zone.local( instant.epoch_millis )
    return zone_label( offset, abbreviation )
