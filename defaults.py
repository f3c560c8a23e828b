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
walltime.defaults -- System-wide default (global) values

"""
__all__				= [ 'tz_variable', 'fallback_zone', 'pattern', 'nanosecond_digits', 'pattern_cache',
                                    'millis_min', 'millis_max',
                                    'config_name', 'config_section', 'config_files', 'config_open' ]

import glob
import os

tz_variable			= 'TZ'		# Environment variable holding the zone descriptor
fallback_zone			= 'UTC'		# Used when the zone descriptor can't be resolved
pattern				= '%Y-%m-%d %H:%M:%S.%L %Z'	# 2014-04-01 10:11:12.345 MDT
nanosecond_digits		= 9		# Default %N width
pattern_cache			= 256		# Most recently used compiled patterns retained

# The Instant's epoch_millis is a signed 64-bit integer
millis_min			= -2**63
millis_max			=  2**63 - 1

# Define the default paths used for configuration files, etc.
config_name			= 'walltime.cfg'	# Default Walltime application configuration file
config_section			= 'walltime'		# ... and its section

def config_paths( filename, extra=None ):
    """Yield the Walltime configuration search paths in *reverse* order of precedence (furthest or
    most general, to nearest or most specific).  This is the order that is required by configparser;
    settings configured in "later" files override those in "earlier" ones.

    """
    yield os.path.join( os.path.dirname( __file__ ), filename )			# walltime installation dir
    yield os.path.join( os.getenv( 'APPDATA', os.sep + 'etc' ), filename )	# global app data dir, eg. /etc/
    yield os.path.join( os.path.expanduser( '~' ), '.walltime', filename )	# user dir, ~username/.walltime/name
    yield os.path.join( os.path.expanduser( '~' ), '.' + filename )		# user dir, ~username/.name
    for e in extra or []:							# any extra dirs...
        yield os.path.join( e, filename )
    yield filename								# current dir (most specific)

# Default Walltime configuration files path, In 'configparser' expected order (most general to most specific)
config_files			= list( config_paths( config_name ))


def config_open( name=None, mode=None, extra=None, reverse=False, **kwds ):
    """Find and open all glob-matched file name(s) found on the standard or provided configuration
    file paths (plus any extra).  By default, yields them in most general to most specific order
    (the order configparser.read_file expects); specify reverse=True to obtain the nearest and most
    specific first.  Files that exist but can't be opened (eg. permissions) are skipped.

    """
    search			= list( config_paths( name or config_name, extra=extra ))
    if reverse:
        search			= reversed( search )
    for fn in search:
        for gn in sorted( glob.glob( fn )):
            try:
                f		= open( gn, mode=mode or 'r', **kwds )
            except (IOError, OSError):
                continue
            yield f
