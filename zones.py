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

__all__				= [ "Zone", "resolve", "resolve_lenient", "environment_descriptor", "environment_zone",
                                    "system_zone", "parse_offset", "format_offset", "InvalidZoneDescriptor" ]

import datetime
import logging
import os
import re
import threading

# Installed packages (eg. pip/setup.py install pytz tzlocal)
import pytz
import tzlocal

from .misc		import mutexmethod
from .			import defaults

log				= logging.getLogger( __package__ )


class InvalidZoneDescriptor( pytz.UnknownTimeZoneError ):
    pass


EPOCH				= datetime.datetime( 1970, 1, 1 )	# naive UTC
MILLISECOND			= datetime.timedelta( milliseconds=1 )
DAY_MILLIS			= 24 * 60 * 60 * 1000

# Zone rules are only consulted within the range a naive datetime can represent (with a day to spare
# on either side, so that astimezone can't overflow); instants outside use the rules at the limits.
_rules_min			= ( datetime.datetime(    1,  1,  2 ) - EPOCH ) // MILLISECOND
_rules_max			= ( datetime.datetime( 9999, 12, 30 ) - EPOCH ) // MILLISECOND

# ISO-style numeric offsets; east of UTC is positive, eg. '+0930', '-05', '+09:30', '-05:00:30'
_iso_offset			= re.compile( r"""^
    (?P<sign>[+-])
    (?P<hh>\d{1,2})
    (?: (?P<c1>:?) (?P<mm>\d{2})
        (?: (?P=c1) (?P<ss>\d{2}) )?
    )?$""", re.VERBOSE )

# POSIX-style abbreviated offsets; *west* of UTC is positive, eg. 'JST-9', 'EST5', 'NST3:30'
_posix_offset			= re.compile( r"""^
    (?P<abbr>[A-Za-z]{3,})
    (?P<sign>[+-]?)
    (?P<hh>\d{1,2})
    (?: : (?P<mm>\d{2})
        (?: : (?P<ss>\d{2}) )?
    )?$""", re.VERBOSE )


def parse_offset( term ):
    """Convert a string like '+hh[[:]mm[[:]ss]]' into -'ve/+'ve (west/east) seconds.  Raises
    ValueError if the term isn't a valid offset of less than 24 hours.

    """
    match			= _iso_offset.match( term )
    if not match:
        raise ValueError( "Invalid offset %r; must be +/-hh[[:]mm[[:]ss]]" % ( term, ))
    return _offset_seconds( match )


def _offset_seconds( match, west=False ):
    hh,mm,ss			= ( int( match.group( g ) or 0 ) for g in ( 'hh', 'mm', 'ss' ))
    if hh > 23 or mm > 59 or ss > 59:
        raise ValueError( "Invalid offset %r; hours, minutes or seconds out of range" % ( match.group( 0 ), ))
    offset			= ( hh * 60 + mm ) * 60 + ss
    if ( match.group( 'sign' ) == '-' ) != west:
        offset			= -offset
    return offset


def format_offset( millis, sep=':' ):
    """Convert a number of -'ve/+'ve milliseconds into '-/+hh:mm', adding ':ss' when the offset has
    seconds (sub-second parts are truncated)."""
    sign			= '-' if millis < 0 else '+'
    seconds			= abs( millis ) // 1000
    result			= "%s%02d%s%02d" % ( sign, seconds // 3600, sep, seconds % 3600 // 60 )
    if seconds % 60:
        result		       += "%s%02d" % ( sep, seconds % 60 )
    return result


class Zone( object ):
    """A resolved timezone; either a named (possibly DST-aware) pytz zone, or a fixed offset from UTC
    in milliseconds with an optional abbreviation (eg. 'JST' from a 'JST-9' descriptor).

    Zones are immutable, and are safe to cache and share.  Resolved zones are memoized per
    descriptor string.

    """
    __slots__			= ( 'name', 'tzinfo', 'fixed_offset_millis', 'abbreviation' )

    UTC				= None			# The UTC Zone; assigned below

    _cache			= {}
    _cls_lock			= threading.Lock()

    def __init__( self, tzinfo, name=None, fixed_offset_millis=None, abbreviation=None ):
        self.tzinfo		= tzinfo
        self.name		= name or str( tzinfo )
        self.fixed_offset_millis= fixed_offset_millis
        self.abbreviation	= abbreviation

    @classmethod
    def fixed( cls, offset_millis, abbreviation=None ):
        """A fixed-offset zone (no DST), of whole milliseconds within +/- 24 hours."""
        offset_millis		= int( offset_millis )
        if not -DAY_MILLIS < offset_millis < DAY_MILLIS:
            raise InvalidZoneDescriptor( "Invalid fixed offset %dms; must be within +/- 24 hours" % offset_millis )
        return cls( datetime.timezone( offset_millis * MILLISECOND ),
                    name=abbreviation or format_offset( offset_millis ),
                    fixed_offset_millis=offset_millis, abbreviation=abbreviation )

    @property
    def is_fixed( self ):
        return self.fixed_offset_millis is not None

    def local( self, epoch_millis ):
        """Return the (offset, dst, abbreviation) in effect at the given instant; the net UTC offset
        and the DST portion of it in milliseconds, and the zone's abbreviation (None if a fixed-offset
        zone has no abbreviation).

        """
        if self.is_fixed:
            return self.fixed_offset_millis, 0, self.abbreviation
        clamped			= min( max( epoch_millis, _rules_min ), _rules_max )
        loc			= pytz.utc.localize( EPOCH + clamped * MILLISECOND ).astimezone( self.tzinfo )
        offset,dst		= ( ( td or datetime.timedelta( 0 )) // MILLISECOND
                                    for td in ( loc.utcoffset(), loc.dst() ))
        return offset, dst, loc.tzname()

    def offset_millis( self, epoch_millis ):
        return self.local( epoch_millis )[0]

    def standard_offset_millis( self, epoch_millis ):
        offset,dst,_		= self.local( epoch_millis )
        return offset - dst

    def localize( self, local_millis, is_dst=False ):
        """Find the UTC offset (in milliseconds) that applies to the given local wall-clock time,
        expressed as milliseconds since the local epoch.  Ambiguous times (during the fall-back
        overlap) are disambiguated by is_dst; non-existent times (during the spring-ahead gap) are
        interpreted using the offset in effect before the gap, if not is_dst.

        """
        if self.is_fixed:
            return self.fixed_offset_millis
        clamped			= min( max( local_millis, _rules_min ), _rules_max )
        loc			= self.tzinfo.localize( EPOCH + clamped * MILLISECOND, is_dst=bool( is_dst ))
        return loc.utcoffset() // MILLISECOND

    def __eq__( self, other ):
        if not isinstance( other, Zone ):
            return NotImplemented
        return ( self.name, self.fixed_offset_millis, self.abbreviation ) \
            == ( other.name, other.fixed_offset_millis, other.abbreviation )

    def __ne__( self, other ):
        result			= self.__eq__( other )
        return result if result is NotImplemented else not result

    def __hash__( self ):
        return hash(( self.name, self.fixed_offset_millis, self.abbreviation ))

    def __str__( self ):
        return self.name

    def __repr__( self ):
        return '<Zone %s>' % self.name

    @classmethod
    def system( cls ):
        """The host's configured timezone, via tzlocal (which respects a TZ variable before attempting
        other host-specific local timezone detection), or the /etc/localtime tzfile.  Never fails;
        falls back to UTC with a warning.

        """
        try:
            name		= tzlocal.get_localzone_name()
            if name:
                tz		= pytz.timezone( name )
                return cls( tz, name=tz.zone )
        except Exception as exc:
            log.warning( "Failed to determine the system timezone name: %s", exc )
        localtime		= os.path.join( os.sep, 'etc', 'localtime' )
        if os.path.isfile( localtime ):
            try:
                return cls.tzfile( localtime )
            except InvalidZoneDescriptor as exc:
                log.warning( "%s", exc )
        log.warning( "Can not find any timezone configuration; using %s", defaults.fallback_zone )
        return cls.UTC

    @classmethod
    def tzfile( cls, path ):
        try:
            with open( path, 'rb' ) as f:
                tz		= pytz.tzfile.build_tzinfo( 'local', f )
        except Exception as exc:
            raise InvalidZoneDescriptor( "Invalid tzfile %r: %s" % ( path, exc ))
        return cls( tz, name=path )

    @classmethod
    @mutexmethod( '_cls_lock' )
    def resolve( cls, descriptor ):
        """Resolve a TZ-style descriptor into a Zone.  An absent or empty descriptor yields the
        system's zone.  Otherwise, in order of preference, the descriptor may be (after removing any
        leading POSIX ':'):

            'Z'				-- UTC
            '/usr/share/zoneinfo/...'	-- a tzfile path
            'America/Edmonton', 'utc'	-- a (case-insensitive) zone name known to pytz
            '+0930', '-05', '+09:30'	-- an ISO numeric offset (east positive)
            'JST-9', 'NST3:30'		-- a POSIX abbreviation and offset (west positive)

        Raises InvalidZoneDescriptor for anything else.

        """
        if isinstance( descriptor, (bytes, bytearray) ):
            try:
                descriptor	= bytes( descriptor ).decode( 'ascii' )
            except UnicodeDecodeError:
                raise InvalidZoneDescriptor( "Invalid zone descriptor %r; not ASCII" % ( descriptor, ))
        if not descriptor or not descriptor.strip():
            return cls.system()

        key			= descriptor.strip()
        zone			= cls._cache.get( key )
        if zone is not None:
            log.debug( "%-30s: %r (cached)", key, zone )
            return zone

        desc			= key[1:] if key.startswith( ':' ) else key
        if desc in ( 'Z', 'z' ):
            zone		= cls.UTC
        elif desc.startswith( os.sep ) and os.path.isfile( desc ):
            zone		= cls.tzfile( desc )
        else:
            zone		= cls._named( desc ) or cls._numeric( desc )
        if zone is None:
            raise InvalidZoneDescriptor(
                "Invalid zone descriptor %r; expect a zone name, +/-hh[[:]mm[[:]ss]] or ABBR[+/-]hh[:mm[:ss]]" % (
                    descriptor, ))
        log.detail( "%-30s: %r", key, zone )
        cls._cache[key]		= zone
        return zone

    @classmethod
    def _named( cls, desc ):
        try:
            tz			= pytz.timezone( desc )
        except ( pytz.UnknownTimeZoneError, ValueError ):
            return None
        return cls( tz, name=tz.zone )

    @classmethod
    def _numeric( cls, desc ):
        try:
            for pattern,west in ( ( _iso_offset, False ), ( _posix_offset, True )):
                match		= pattern.match( desc )
                if match:
                    abbr	= match.groupdict().get( 'abbr' )
                    return cls.fixed( _offset_seconds( match, west=west ) * 1000,
                                      abbreviation=abbr.upper() if abbr else None )
        except ValueError as exc:
            raise InvalidZoneDescriptor( "Invalid zone descriptor %r: %s" % ( desc, exc ))
        return None


Zone.UTC			= Zone( pytz.utc, name='UTC' )


def resolve( descriptor ):
    """Resolve a TZ descriptor string (or None) into a Zone, or raise InvalidZoneDescriptor."""
    return Zone.resolve( descriptor )


def resolve_lenient( descriptor ):
    """Resolve a TZ descriptor, but fall back to the default fallback zone (UTC) on failure; unknown TZ
    values are historically common, and must not abort the caller's operation."""
    try:
        return Zone.resolve( descriptor )
    except InvalidZoneDescriptor as exc:
        log.warning( "%s; falling back to %s", exc, defaults.fallback_zone )
        return Zone.resolve( defaults.fallback_zone )


def system_zone():
    return Zone.system()


def environment_descriptor( lookup=None ):
    """Obtain the raw TZ descriptor (or None) via the supplied environment lookup (default:
    os.environ.get)."""
    return ( lookup or os.environ.get )( defaults.tz_variable )


def environment_zone( lookup=None ):
    """The zone described by the environment's TZ, leniently resolved."""
    return resolve_lenient( environment_descriptor( lookup ))
