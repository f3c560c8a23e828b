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

import logging
import time

__author__                      = "Perry Kundert"
__email__                       = "perry@hardconsulting.com"
__copyright__                   = "Copyright (c) 2013 Hard Consulting Corporation"
__license__                     = "Dual License: GPLv3 (or later) and Commercial (see LICENSE)"

"""
Miscellaneous functionality used by the zone, instant and formatting modules.
"""

__all__				= [ "mutexmethod", "timer", "change_function" ]

#
# misc.mutexmethod -- apply a synchronization mutex around a method invocation
#
def mutexmethod( mutex='lock', blocking=True ):
    """A method synchronization decorator.  Acquires the mutex attribute (default: '<self>.lock') on
    the class/instance of the bound 'method' during its invocation.  If not 'blocking', raises a
    RuntimeError if the mutex cannot be acquired, instead of blocking.

    Supports instance methods, and class methods when applied beneath @classmethod:

        @classmethod
        @mutexmethod( '_cls_lock' )
        def lookup( cls, key ):
            ...

    """
    def decorator( method ):
        def wrapper( *args, **kwds ):
            # Get the class method's class, or the instance method's self argument, then find mutex
            lock		= getattr( getattr( method, '__self__', args[0] ), mutex )
            if not lock.acquire( blocking ):
                raise RuntimeError( "Lock %r is held" % mutex )
            try:
                return method( *args, **kwds )
            finally:
                lock.release()
        wrapper.__name__	= method.__name__
        wrapper.__doc__		= method.__doc__
        return wrapper
    return decorator


#
# misc.timer	-- the wall-clock, in float seconds since the UNIX epoch
#
timer				= time.time


def change_function( function, **kwds ):
    """Change a function's code object with one or more changed co_... attributes, eg.:

            change_function( func, co_filename="new/file/path.py" )

    """
    function.__code__		= function.__code__.replace( **kwds )

#
# logging.normal	-- regular program output
# logging.detail	-- detail in addition to normal output
# logging.trace		-- logs less relevant than debug (eg. multiline logs)
#
#     Augment logging with some new levels, between INFO and WARNING, used for normal/detail output.
#
#     Logging finds the logging function's caller by looking for the first frame whose co_filename
# is *not* the logger source file.  So, our functions must appear to originate from logging._srcfile.
#
#      .FATAL 		       == 50
#      .WARNING 	       == 30
logging.NORMAL			= logging.INFO+5
logging.DETAIL			= logging.INFO+3
#      .INFO    	       == 20
#      .DEBUG    	       == 10
logging.TRACE			= logging.NOTSET+5
#      .NOTSET    	       == 0

logging.addLevelName( logging.NORMAL,	'NORMAL' )
logging.addLevelName( logging.DETAIL,	'DETAIL' )
logging.addLevelName( logging.TRACE,	'TRACE' )

def __normal( self, msg, *args, **kwargs ):
    if self.isEnabledFor( logging.NORMAL ):
        self._log( logging.NORMAL, msg, args, **kwargs )

def __detail( self, msg, *args, **kwargs ):
    if self.isEnabledFor( logging.DETAIL ):
        self._log( logging.DETAIL, msg, args, **kwargs )

def __trace( self, msg, *args, **kwargs ):
    if self.isEnabledFor( logging.TRACE ):
        self._log( logging.TRACE, msg, args, **kwargs )

change_function( __normal, co_filename=logging._srcfile )
change_function( __detail, co_filename=logging._srcfile )
change_function( __trace, co_filename=logging._srcfile )

logging.Logger.normal		= __normal
logging.Logger.detail		= __detail
logging.Logger.trace		= __trace

def __normal_root( msg, *args, **kwargs ):
    if len( logging.root.handlers ) == 0:
        logging.basicConfig()
    logging.root.normal( msg, *args, **kwargs )

def __detail_root( msg, *args, **kwargs ):
    if len( logging.root.handlers ) == 0:
        logging.basicConfig()
    logging.root.detail( msg, *args, **kwargs )

def __trace_root( msg, *args, **kwargs ):
    if len( logging.root.handlers ) == 0:
        logging.basicConfig()
    logging.root.trace( msg, *args, **kwargs )

change_function( __normal_root, co_filename=logging._srcfile )
change_function( __detail_root, co_filename=logging._srcfile )
change_function( __trace_root, co_filename=logging._srcfile )
logging.normal			= __normal_root
logging.detail			= __detail_root
logging.trace			= __trace_root
