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

__all__				= [ "CompiledPattern", "directive", "compile", "render", "strftime",
                                    "InvalidFormatPattern" ]

import collections
import logging
import threading

from .misc		import mutexmethod
from .zones		import format_offset
from .fields		import breakdown, days_from_civil, is_leap
from .instant		import check_nanoseconds
from .			import defaults

log				= logging.getLogger( __package__ )


class InvalidFormatPattern( ValueError ):
    pass


_weekdays			= ( b'Sunday', b'Monday', b'Tuesday', b'Wednesday',
                                    b'Thursday', b'Friday', b'Saturday' )
_months				= ( b'January', b'February', b'March', b'April', b'May', b'June', b'July',
                                    b'August', b'September', b'October', b'November', b'December' )

_flags				= b'-_0^#'

# Composite directives, expanded into their constituent directives when compiled
_composite			= {
    b'F':		b'%Y-%m-%d',
    b'T':		b'%H:%M:%S',
    b'D':		b'%m/%d/%y',
    b'x':		b'%m/%d/%y',
    b'R':		b'%H:%M',
    b'r':		b'%I:%M:%S %p',
    b'X':		b'%H:%M:%S',
    b'c':		b'%a %b %e %H:%M:%S %Y',
    b'+':		b'%a %b %e %H:%M:%S %Z %Y',
}

# Directives that produce a literal
_literal			= {
    b'%':		b'%',
    b'n':		b'\n',
    b't':		b'\t',
}


def iso_week( fields ):
    """The ISO 8601 (year, week) of the fields; weeks begin on Monday, and week 1 contains the
    year's first Thursday."""
    year			= fields.year
    isoweekday			= ( fields.weekday + 6 ) % 7 + 1		# Mon == 1, ..., Sun == 7
    week			= ( fields.year_day - isoweekday + 10 ) // 7
    if week < 1:
        year		       -= 1
        week			= iso_weeks( year )
    elif week > iso_weeks( year ):
        year		       += 1
        week			= 1
    return year, week


def iso_weeks( year ):
    jan1			= ( days_from_civil( year, 1, 1 ) + 4 ) % 7	# Sun == 0
    return 53 if jan1 == 4 or ( jan1 == 3 and is_leap( year )) else 52


class _context( object ):
    """Everything directives may render, from one decomposition of the Instant."""
    __slots__			= ( 'fields', 'offset', 'nanos', 'seconds' )

    def __init__( self, fields, offset, nanos, seconds ):
        self.fields		= fields
        self.offset		= offset
        self.nanos		= nanos
        self.seconds		= seconds


# Numeric directives: conversion: (value, default width, default padding)
_numeric			= {
    b'Y':		( lambda c: c.fields.year,				4, b'0' ),
    b'C':		( lambda c: c.fields.year // 100,			2, b'0' ),
    b'y':		( lambda c: c.fields.year % 100,			2, b'0' ),
    b'm':		( lambda c: c.fields.month,				2, b'0' ),
    b'd':		( lambda c: c.fields.day,				2, b'0' ),
    b'e':		( lambda c: c.fields.day,				2, b' ' ),
    b'j':		( lambda c: c.fields.year_day,				3, b'0' ),
    b'H':		( lambda c: c.fields.hour,				2, b'0' ),
    b'k':		( lambda c: c.fields.hour,				2, b' ' ),
    b'I':		( lambda c: ( c.fields.hour + 11 ) % 12 + 1,		2, b'0' ),
    b'l':		( lambda c: ( c.fields.hour + 11 ) % 12 + 1,		2, b' ' ),
    b'M':		( lambda c: c.fields.minute,				2, b'0' ),
    b'S':		( lambda c: c.fields.second,				2, b'0' ),
    b'u':		( lambda c: ( c.fields.weekday + 6 ) % 7 + 1,		1, b'0' ),
    b'w':		( lambda c: c.fields.weekday,				1, b'0' ),
    b's':		( lambda c: c.seconds,					1, b'0' ),
    b'U':		( lambda c: ( c.fields.year_day + 6 - c.fields.weekday ) // 7, 2, b'0' ),
    b'W':		( lambda c: ( c.fields.year_day + 6 - ( c.fields.weekday + 6 ) % 7 ) // 7, 2, b'0' ),
    b'G':		( lambda c: iso_week( c.fields )[0],			4, b'0' ),
    b'g':		( lambda c: iso_week( c.fields )[0] % 100,		2, b'0' ),
    b'V':		( lambda c: iso_week( c.fields )[1],			2, b'0' ),
}

# Textual directives: conversion: value
_textual			= {
    b'A':		lambda c: _weekdays[c.fields.weekday],
    b'a':		lambda c: _weekdays[c.fields.weekday][:3],
    b'B':		lambda c: _months[c.fields.month-1],
    b'b':		lambda c: _months[c.fields.month-1][:3],
    b'h':		lambda c: _months[c.fields.month-1][:3],
    b'p':		lambda c: b'PM' if c.fields.hour >= 12 else b'AM',
    b'P':		lambda c: b'pm' if c.fields.hour >= 12 else b'am',
    b'Z':		lambda c: ( c.fields.zone_label.encode( 'ascii', 'replace' )
                                            if c.fields.zone_label else format_offset( c.offset, sep='' ).encode( 'ascii' )),
}


class directive( object ):
    """A single %-directive, with its flags, optional width and (for %z only) colons.  Composite
    directives (eg. %F) carry their compiled expansion."""
    __slots__			= ( 'conversion', 'flags', 'width', 'colons', 'expansion' )

    def __init__( self, conversion, flags=b'', width=None, colons=0, expansion=None ):
        self.conversion		= conversion
        self.flags		= flags
        self.width		= width
        self.colons		= colons
        self.expansion		= expansion

    def __repr__( self ):
        return '%' + ( self.flags + ( b'%d' % self.width if self.width is not None else b'' )
                       + b':' * self.colons + self.conversion ).decode( 'ascii' )

    def padding( self, default ):
        if b'-' in self.flags:
            return None
        if b'_' in self.flags:
            return b' '
        if b'0' in self.flags:
            return b'0'
        return default

    def number( self, value, width, pad ):
        """Default widths count digits (so year -1 is '-0001'); an explicit width includes the sign."""
        sign			= b'-' if value < 0 else b''
        digits			= b'%d' % abs( value )
        pad			= self.padding( pad )
        if pad == b'0':
            if self.width is None:
                return sign + digits.rjust( width, pad )
            return sign + digits.rjust( self.width - len( sign ), pad )
        width			= width if self.width is None else self.width
        if pad:
            return ( sign + digits ).rjust( width, pad )
        return sign + digits

    def text( self, value ):
        if b'^' in self.flags:
            value		= value.upper()
        elif b'#' in self.flags:
            value		= value.swapcase()
        pad			= self.padding( b' ' )
        if pad and self.width:
            value		= value.rjust( self.width, pad )
        return value

    def fraction( self, nanos, default ):
        """The sub-second digits, truncated or zero-extended to the width."""
        width			= default if self.width is None else self.width
        digits			= b'%09d' % nanos
        return digits[:width] if width <= 9 else digits.ljust( width, b'0' )

    def offset( self, millis ):
        seconds			= abs( millis ) // 1000
        hh,mm,ss		= seconds // 3600, seconds % 3600 // 60, seconds % 60
        if self.colons == 0:
            body		= b'%02d%02d' % ( hh, mm )
        elif self.colons == 1:
            body		= b'%02d:%02d' % ( hh, mm )
        else:
            body		= b'%02d:%02d:%02d' % ( hh, mm, ss )
        sign			= b'-' if millis < 0 else b'+'
        pad			= self.padding( b'0' )
        if self.width and pad == b'0':
            return sign + body.rjust( self.width - 1, pad )
        if self.width and pad:
            return ( sign + body ).rjust( self.width, pad )
        return sign + body

    def render( self, ctx ):
        c			= self.conversion
        if self.expansion is not None:
            return self.text( b''.join( t if isinstance( t, bytes ) else t.render( ctx )
                                        for t in self.expansion ))
        if c in _numeric:
            value,width,pad	= _numeric[c]
            return self.number( value( ctx ), width, pad )
        if c in _textual:
            return self.text( _textual[c]( ctx ))
        if c == b'L':
            return self.fraction( ctx.nanos, 3 )
        if c == b'N':
            return self.fraction( ctx.nanos, defaults.nanosecond_digits )
        assert c == b'z', "Unrecognized compiled directive %r" % self
        return self.offset( ctx.offset )


_conversions			= set( _numeric ) | set( _textual ) | set( _composite ) \
                                  | set( _literal ) | { b'L', b'N', b'z' }


class CompiledPattern( object ):
    """An ordered sequence of literal bytes and directive tokens compiled from a strftime-style
    pattern.  Stateless and reusable; the most recently used compiled patterns (up to
    defaults.pattern_cache of them) are memoized.

    Unknown or unterminated directives raise InvalidFormatPattern; they are never passed through.

    """
    __slots__			= ( 'pattern', 'tokens' )

    _cache			= collections.OrderedDict()
    _cls_lock			= threading.Lock()

    def __init__( self, pattern, tokens ):
        self.pattern		= pattern
        self.tokens		= tuple( tokens )

    def __repr__( self ):
        return '<%s %r: %r>' % ( self.__class__.__name__, self.pattern, self.tokens )

    @classmethod
    @mutexmethod( '_cls_lock' )
    def compile( cls, pattern ):
        if isinstance( pattern, str ):
            pattern		= pattern.encode( 'utf-8' )
        pattern			= bytes( pattern )
        compiled		= cls._cache.get( pattern )
        if compiled is not None:
            cls._cache.move_to_end( pattern )
            return compiled
        compiled		= cls( pattern, cls.tokenize( pattern ))
        log.debug( "Compiled %r", compiled )
        cls._cache[pattern]	= compiled
        while len( cls._cache ) > max( 1, defaults.pattern_cache ):
            cls._cache.popitem( last=False )	# least recently used
        return compiled

    @classmethod
    def tokenize( cls, pattern ):
        """Yields runs of literal bytes and directives."""
        literal			= bytearray()
        i,n			= 0,len( pattern )
        while i < n:
            pct			= pattern.find( b'%', i )
            if pct < 0:
                literal	       += pattern[i:]
                break
            literal	       += pattern[i:pct]
            i			= pct + 1
            flags		= b''
            while pattern[i:i+1] and pattern[i:i+1] in _flags:
                flags	       += pattern[i:i+1]
                i	       += 1
            digits		= b''
            while pattern[i:i+1].isdigit():
                digits	       += pattern[i:i+1]
                i	       += 1
            colons		= 0
            while pattern[i:i+1] == b':':
                colons	       += 1
                i	       += 1
            conversion		= pattern[i:i+1]
            i		       += 1
            if not conversion:
                raise InvalidFormatPattern( "Unterminated directive %r at offset %d in pattern %r" % (
                    pattern[pct:], pct, pattern ))
            if conversion not in _conversions or ( colons and ( conversion != b'z' or colons > 2 )):
                raise InvalidFormatPattern( "Unknown directive %r at offset %d in pattern %r" % (
                    pattern[pct:i], pct, pattern ))
            if conversion in _literal:
                literal	       += _literal[conversion]
                continue
            if literal:
                yield bytes( literal )
                literal		= bytearray()
            expansion		= None
            if conversion in _composite:
                expansion	= tuple( cls.tokenize( _composite[conversion] ))
            yield directive( conversion, flags=flags, width=int( digits ) if digits else None,
                             colons=colons, expansion=expansion )
        if literal:
            yield bytes( literal )

    def render( self, instant, fractional=None, locale=None, tz=None ):
        """Render the instant (in its zone, or the zone described by a non-None tz) as bytes.  The
        sub-second value for %L/%N is the instant's own, unless fractional nanoseconds are supplied.
        Only the C (English) locale is supported; other locale hints are ignored."""
        if locale not in ( None, 'C', 'POSIX' ) and not str( locale ).startswith( 'en' ):
            log.detail( "Locale %r unsupported; rendering %r in the C locale", locale, self.pattern )
        nanos			= instant.fractional_nanoseconds() if fractional is None \
                                  else check_nanoseconds( fractional )
        fields,offset		= breakdown( instant, tz )
        ctx			= _context( fields, offset, nanos, instant.whole_seconds() )
        return b''.join( t if isinstance( t, bytes ) else t.render( ctx )
                         for t in self.tokens )


def compile( pattern ):
    """Compile a strftime-style pattern (bytes, or str encoded as UTF-8) into a CompiledPattern."""
    return CompiledPattern.compile( pattern )


def render( compiled, instant, fractional=None, locale=None, tz=None ):
    return compiled.render( instant, fractional=fractional, locale=locale, tz=tz )


def strftime( pattern, instant, fractional=None, locale=None, tz=None ):
    return CompiledPattern.compile( pattern ).render( instant, fractional=fractional, locale=locale, tz=tz )
