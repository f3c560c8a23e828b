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

__all__				= [ "Instant", "now", "duplicate", "DomainError", "Overflow",
                                    "MILLIS_MIN", "MILLIS_MAX" ]

import logging
import math

from .misc		import timer
from .zones		import Zone, environment_zone
from .			import defaults

log				= logging.getLogger( __package__ )


class DomainError( ValueError ):
    """A numeric input is outside its permitted range."""


class Overflow( OverflowError ):
    """A computed epoch_millis doesn't fit in a signed 64-bit integer."""


MILLIS_MIN			= defaults.millis_min
MILLIS_MAX			= defaults.millis_max

NANOS_PER_SECOND		= 1000000000
NANOS_PER_MILLI			= 1000000


def check_millis( millis ):
    if not MILLIS_MIN <= millis <= MILLIS_MAX:
        raise Overflow( "Instant of %dms exceeds the signed 64-bit millisecond range" % millis )
    return millis


def check_nanoseconds( nanoseconds ):
    if not 0 <= nanoseconds < NANOS_PER_SECOND:
        raise DomainError( "Invalid sub-second nanoseconds %r; must be 0 to 999,999,999" % ( nanoseconds, ))
    return nanoseconds


class Instant( object ):
    """An instant in time, as integer milliseconds since the UNIX epoch (may be negative), paired with
    the Zone used to render it.

    Apart from set_fractional_millis, which replaces only the sub-second portion in place, an
    Instant is never changed; create a new one (eg. via duplicate) instead.  Comparisons and hashing
    are by epoch_millis only; the same instant in different zones is equal.

    """
    __slots__			= ( '_millis', '_zone' )

    def __init__( self, epoch_millis=0, zone=None ):
        self._millis		= check_millis( int( epoch_millis ))
        self._zone		= Zone.UTC if zone is None else zone

    @property
    def epoch_millis( self ):
        return self._millis

    @property
    def zone( self ):
        return self._zone

    @classmethod
    def now( cls, zone=None, clock=None, lookup=None ):
        """Capture the current wall-clock time from clock (default: misc.timer, float seconds since
        the epoch).  With no zone, the environment's TZ (via lookup) is leniently resolved."""
        if zone is None:
            zone		= environment_zone( lookup )
        return cls( math.floor(( clock or timer )() * 1000 ), zone )

    @classmethod
    def duplicate( cls, other, zone=None ):
        """A copy of other's instant, in the target zone (default: other's zone)."""
        return cls( other.epoch_millis, other.zone if zone is None else zone )

    def set_fractional_millis( self, nanoseconds ):
        """Replace the sub-second part (keeping the whole second) with nanoseconds, truncated to
        milliseconds.  Returns the supplied nanoseconds."""
        check_nanoseconds( nanoseconds )
        self._millis		= check_millis( self.whole_seconds() * 1000 + int( nanoseconds ) // NANOS_PER_MILLI )
        return nanoseconds

    def whole_seconds( self ):
        """Floor, not truncation; -500ms is in second -1."""
        return self._millis // 1000

    def fractional_millis( self ):
        return self._millis % 1000

    def fractional_microseconds( self ):
        return self.fractional_millis() * 1000

    def fractional_nanoseconds( self ):
        return self.fractional_millis() * NANOS_PER_MILLI

    def utc_offset_millis( self ):
        return self._zone.offset_millis( self._millis )

    def utc_offset( self ):
        """Whole seconds east of UTC in effect at this instant, in this Instant's zone."""
        return int( self.utc_offset_millis() / 1000 )

    def decompose( self, tz=None ):
        from .fields import decompose
        return decompose( self, tz )

    def strftime( self, pattern, fractional=None, tz=None ):
        from .patterns import strftime
        return strftime( pattern, self, fractional=fractional, tz=tz )

    def __int__( self ):
        return self.whole_seconds()

    def __float__( self ):
        return self._millis / 1000

    def __repr__( self ):
        return '<%s %s =~= %.3f>' % ( self.__class__.__name__, self._zone, self._millis / 1000 )

    def __str__( self ):
        return self.strftime( defaults.pattern ).decode( 'ascii', 'replace' )

    def __hash__( self ):
        return hash( self._millis )

    # Comparisons.  Always numeric, on epoch_millis.
    def __eq__( self, rhs ):
        if not isinstance( rhs, Instant ):
            return NotImplemented
        return self._millis == rhs._millis
    def __ne__( self, rhs ):
        if not isinstance( rhs, Instant ):
            return NotImplemented
        return self._millis != rhs._millis
    def __lt__( self, rhs ):
        if not isinstance( rhs, Instant ):
            return NotImplemented
        return self._millis < rhs._millis
    def __gt__( self, rhs ):
        if not isinstance( rhs, Instant ):
            return NotImplemented
        return self._millis > rhs._millis
    def __le__( self, rhs ):
        if not isinstance( rhs, Instant ):
            return NotImplemented
        return self._millis <= rhs._millis
    def __ge__( self, rhs ):
        if not isinstance( rhs, Instant ):
            return NotImplemented
        return self._millis >= rhs._millis


now				= Instant.now
duplicate			= Instant.duplicate
