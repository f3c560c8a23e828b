import logging
import threading

import pytest

from .misc import mutexmethod


class Counter( object ):
    def __init__( self ):
        self.lock		= threading.Lock()
        self.count		= 0

    @mutexmethod()
    def incr( self ):
        self.count	       += 1
        return self.count

    @mutexmethod( blocking=False )
    def peek( self ):
        return self.count


def test_misc_mutexmethod():
    c				= Counter()
    threads			= [ threading.Thread( target=c.incr ) for _ in range( 10 ) ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert c.count == 10
    assert c.peek() == 10
    assert Counter.incr.__name__ == 'incr'

    with c.lock:
        with pytest.raises( RuntimeError ):
            c.peek()


def test_misc_logging( caplog ):
    assert logging.getLevelName( logging.NORMAL ) == 'NORMAL'
    assert logging.WARNING > logging.NORMAL > logging.DETAIL > logging.INFO > logging.TRACE
    log				= logging.getLogger( 'walltime.test' )
    with caplog.at_level( logging.DETAIL ):
        log.normal( "shown %d", 1 )
        log.detail( "shown %d", 2 )
        log.trace( "hidden" )
    assert "shown 1" in caplog.text and "shown 2" in caplog.text
    assert "hidden" not in caplog.text
    # The caller is reported, not the logging augmentation
    assert all( r.filename == 'misc_test.py' for r in caplog.records )
