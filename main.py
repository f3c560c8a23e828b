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

"""
walltime.main	-- Render, decompose or construct wall-clock times from the command line

"""

import argparse
import configparser
import decimal
import logging
import math
import sys

from .			import defaults, log_cfg
from .zones		import resolve_lenient, environment_descriptor, InvalidZoneDescriptor
from .instant		import Instant, DomainError, Overflow
from .patterns		import InvalidFormatPattern
from .components	import from_components, from_utc_millis, UnsupportedConfiguration

log				= logging.getLogger( __package__ )

_timeseps			= str.maketrans( ":-.T", "    " )


def config_load( extra=None ):
    """Load any walltime.cfg files from the standard configuration paths (plus any extra dirs), most
    general first, so that nearer files override.  Returns the [walltime] (or DEFAULT) section."""
    config			= configparser.ConfigParser(
        comment_prefixes=('#',), inline_comment_prefixes=('#',),
        allow_no_value=True, empty_lines_in_values=False,
        interpolation=configparser.ExtendedInterpolation() )
    for f in defaults.config_open( extra=extra ):
        with f:
            log.detail( "Loading config %s", f.name )
            config.read_file( f )
    if defaults.config_section in config:
        return config[defaults.config_section]
    return config['DEFAULT']


def instant_from_string( term, utc_offset=None, tz=None ):
    """Parse a UNIX timestamp (eg. '1399326141.999'), or a wall-clock time 'YYYY-MM-DD HH:MM:SS[.sss]'
    in the zone described by tz (or at the fixed utc_offset seconds)."""
    try:
        value			= decimal.Decimal( term )
    except decimal.InvalidOperation:
        pass
    else:
        if not value.is_finite():
            raise DomainError( "Invalid UNIX timestamp %r" % term )
        seconds			= math.floor( value )
        return from_utc_millis( seconds, int(( value - seconds ) * 1000000000 ))

    terms			= term.translate( _timeseps ).split()
    if not 6 <= len( terms ) <= 7 or not all( t.isdigit() for t in terms ):
        raise DomainError( "Invalid time %r; expect YYYY-MM-DD HH:MM:SS[.sss] or a UNIX timestamp" % term )
    nanoseconds			= int( terms[6].ljust( 9, '0' )[:9] ) if len( terms ) == 7 else None
    year,month,day,hour,minute,second = map( int, terms[:6] )
    return from_components( second, minute, hour, day, month, year, nanoseconds=nanoseconds,
                            utc_offset=utc_offset, tz=tz )


def main( argv=None, lookup=None ):
    """Render each supplied time (default: now) in the selected zone and format.

    """
    ap				= argparse.ArgumentParser(
        description = "Render, decompose or construct wall-clock times",
        formatter_class = argparse.RawDescriptionHelpFormatter,
        epilog = """\

Times may be UNIX timestamps (eg. 1399326141.999), or wall-clock times in the
target zone (eg. '2014-05-05 15:42:21.999'); the default is the current time.

The zone is a TZ-style descriptor (eg. America/Edmonton, +09:30, JST-9); the
default is the 'timezone' in the [walltime] section of any walltime.cfg, or the
TZ environment variable.  An unknown zone falls back to UTC. """ )

    ap.add_argument( '-v', '--verbose', action="count",
                     default=0,
                     help="Display logging information." )
    ap.add_argument( '-l', '--log',
                     help="Log file, if desired" )
    ap.add_argument( '-c', '--config', action='append',
                     help="Additional directory to search for %s" % defaults.config_name )
    ap.add_argument( '-z', '--timezone',
                     default=None,
                     help="Zone descriptor (default: from config, or $%s)" % defaults.tz_variable )
    ap.add_argument( '-f', '--format',
                     default=None,
                     help="strftime-style format (default: %r)" % defaults.pattern.replace( '%', '%%' ))
    ap.add_argument( '-o', '--utc-offset', type=int,
                     default=None,
                     help="Interpret wall-clock times at this fixed offset (seconds east of UTC)" )
    ap.add_argument( '-d', '--decompose', action='store_true',
                     help="Print the decomposed calendar fields, instead of the formatted time" )
    ap.add_argument( 'times', nargs="*",
                     help="UNIX timestamps, or 'YYYY-MM-DD HH:MM:SS[.sss]' wall-clock times" )

    args			= ap.parse_args( argv )

    # Set up logging level (-v...) and --log <file>
    levelmap 			= {
        0: logging.WARNING,
        1: logging.NORMAL,
        2: logging.DETAIL,
        3: logging.INFO,
        4: logging.DEBUG,
        }
    log_cfg['level']		= ( levelmap[args.verbose]
                                    if args.verbose in levelmap
                                    else logging.DEBUG )
    if args.log:
        log_cfg['filename'] = args.log

    logging.basicConfig( **log_cfg )

    config			= config_load( extra=args.config )
    tz				= args.timezone or config.get( 'timezone' ) or environment_descriptor( lookup )
    pattern			= args.format or config.get( 'format' ) or defaults.pattern
    zone			= resolve_lenient( tz )
    log.normal( "Rendering in %s with %r", zone, pattern )

    failed			= 0
    for term in args.times or [ None ]:
        try:
            if term is None:
                instant		= Instant.now( zone )
            else:
                instant		= Instant.duplicate( instant_from_string( term, utc_offset=args.utc_offset, tz=zone ), zone )
            if args.decompose:
                print( repr( instant.decompose() ))
            else:
                print( instant.strftime( pattern ).decode( 'utf-8', 'replace' ))
        except ( DomainError, Overflow, InvalidFormatPattern, UnsupportedConfiguration, InvalidZoneDescriptor ) as exc:
            log.warning( "%s: %s", term, exc )
            failed	       += 1
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit( main() )
