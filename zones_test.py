import logging
import os

import pytest
import pytz

from .zones import (
    Zone, resolve, resolve_lenient, _rules_min, _rules_max, environment_descriptor, environment_zone,
    parse_offset, format_offset, InvalidZoneDescriptor )


def test_zones_offsets():
    assert parse_offset( '+0930' )	==  34200
    assert parse_offset( '+09:30' )	==  34200
    assert parse_offset( '-05' )	== -18000
    assert parse_offset( '-5' )		== -18000
    assert parse_offset( '-05:00:30' )	== -18030
    for bad in ( '0930', '+24', '+09:60', '+09:30:60', '+09:3', '+0930:15', '+' ):
        with pytest.raises( ValueError ):
            parse_offset( bad )

    assert format_offset(  34200000 )	== '+09:30'
    assert format_offset( -18000000 )	== '-05:00'
    assert format_offset( -18030000 )	== '-05:00:30'
    assert format_offset(         0 )	== '+00:00'
    assert format_offset(  34200000, sep='' ) == '+0930'


def test_zones_numeric():
    """Numeric offsets are fixed zones, without DST, at any instant."""
    z				= resolve( "+0930" )
    assert z.is_fixed and z.fixed_offset_millis == 34200000
    assert z.name == '+09:30' and z.abbreviation is None
    for millis in ( 0, -1, 1399326141999, -2**62 ):
        assert z.local( millis ) == ( 34200000, 0, None )
    assert resolve( "-05" ).fixed_offset_millis == -18000000
    assert resolve( "+0930" ) is z	# memoized

    # POSIX forms are west-positive, and keep their abbreviation
    jst				= resolve( "JST-9" )
    assert jst.fixed_offset_millis == 9 * 3600 * 1000
    assert jst.name == 'JST' and jst.local( 0 ) == ( 32400000, 0, 'JST' )
    assert resolve( "nst3:30" ).fixed_offset_millis == -( 3 * 3600 + 30 * 60 ) * 1000
    assert resolve( "nst3:30" ).abbreviation == 'NST'

    with pytest.raises( InvalidZoneDescriptor ):
        resolve( "+2400" )
    with pytest.raises( InvalidZoneDescriptor ):
        Zone.fixed( 24 * 3600 * 1000 )


def test_zones_named():
    edm				= resolve( "America/Edmonton" )
    assert not edm.is_fixed
    assert edm.name == 'America/Edmonton'
    # 2014-05-05 21:42:21 UTC is during MDT; 2014-01-01 07:00:00 UTC is MST
    assert edm.local( 1399326141999 ) == ( -6 * 3600000, 3600000, 'MDT' )
    assert edm.local( 1388559600000 ) == ( -7 * 3600000, 0, 'MST' )
    assert edm.standard_offset_millis( 1399326141999 ) == -7 * 3600000
    assert edm.offset_millis( 1399326141999 ) == -6 * 3600000

    # A leading POSIX ':' is ignored, and names are case-insensitive
    assert resolve( ":America/Edmonton" ) == edm
    assert resolve( "america/edmonton" ) == edm

    assert resolve( "UTC" ) == Zone.UTC
    assert resolve( "Z" ) is Zone.UTC
    assert resolve( "UTC" ).local( 0 ) == ( 0, 0, 'UTC' )

    # Instants beyond the range of datetime use the zone's rules at the limits
    assert edm.local( 2**62 ) == edm.local( 2**61 ) == edm.local( _rules_max )
    assert edm.local( -2**62 ) == edm.local( _rules_min )
    tyo				= resolve( "Asia/Tokyo" )
    assert tyo.local( 2**62 ) == tyo.local( 2**61 ) == ( 9 * 3600000, 0, 'JST' )


def test_zones_localize():
    """Wall-clock times are localized to UTC offsets; ambiguous times are resolved by is_dst."""
    edm				= resolve( "America/Edmonton" )
    # 2014-11-02 01:30 local happens twice; MDT (-6) then MST (-7)
    local			= 1414891800000	# 2014-11-02 01:30:00, as millis since the local epoch
    assert edm.localize( local, is_dst=True )  == -6 * 3600000
    assert edm.localize( local, is_dst=False ) == -7 * 3600000
    assert resolve( "+0930" ).localize( local, is_dst=True ) == 34200000


def test_zones_invalid():
    for bad in ( "Nowhere/Special", "+09:3", "12345", "EST+", "!@#$", b'\xff\xfe' ):
        with pytest.raises( InvalidZoneDescriptor ):
            resolve( bad )
    # InvalidZoneDescriptor is a pytz.UnknownTimeZoneError, and hence a KeyError
    with pytest.raises( pytz.UnknownTimeZoneError ):
        resolve( "Nowhere/Special" )
    with pytest.raises( KeyError ):
        resolve( "Nowhere/Special" )


def test_zones_lenient( caplog ):
    with caplog.at_level( logging.WARNING ):
        assert resolve_lenient( "Nowhere/Special" ) == Zone.UTC
    assert "falling back to UTC" in caplog.text
    assert resolve_lenient( "America/Edmonton" ).name == 'America/Edmonton'


def test_zones_system():
    """The system zone is always available, whether or not the descriptor is present."""
    for descriptor in ( None, "", "   ", b'' ):
        zone			= resolve( descriptor )
        assert isinstance( zone, Zone )
        assert isinstance( zone.offset_millis( 0 ), int )


def test_zones_environment():
    env				= { 'TZ': 'Europe/Berlin' }
    assert environment_descriptor( env.get ) == 'Europe/Berlin'
    assert environment_zone( env.get ).name == 'Europe/Berlin'
    assert environment_zone( { 'TZ': 'garbage!' }.get ) == Zone.UTC
    assert isinstance( environment_zone( {}.get ), Zone )
    assert environment_descriptor() == os.environ.get( 'TZ' )


def test_zones_tzfile( tmp_path ):
    """A TZ naming a tzfile is loaded from that file."""
    source			= os.path.join( os.path.dirname( pytz.__file__ ), 'zoneinfo', 'America', 'Edmonton' )
    if not os.path.isfile( source ):
        pytest.skip( "pytz zoneinfo files not available" )
    path			= tmp_path / 'Edmonton'
    with open( source, 'rb' ) as f:
        path.write_bytes( f.read() )
    zone			= resolve( str( path ))
    assert zone.name == str( path )
    assert zone.local( 1399326141999 ) == ( -6 * 3600000, 3600000, 'MDT' )

    bad				= tmp_path / 'garbage'
    bad.write_bytes( b'not a tzfile' )
    with pytest.raises( InvalidZoneDescriptor ):
        resolve( str( bad ))
