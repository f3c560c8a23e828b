import pytest

from .zones import Zone, resolve, InvalidZoneDescriptor
from .instant import Instant, DomainError, Overflow
from .fields import decompose
from .components import from_components, from_utc_millis, UnsupportedConfiguration


def test_components_named():
    t				= from_components( 21, 42, 15, 5, 5, 2014, tz='America/Edmonton' )
    assert t.epoch_millis == 1399326141000
    assert t.zone.name == 'America/Edmonton'
    t				= from_components( 21, 42, 15, 5, 5, 2014, nanoseconds=999999999,
                                           tz=resolve( 'America/Edmonton' ))
    assert t.epoch_millis == 1399326141999

    # The zone may come from the environment
    t				= from_components( 21, 42, 15, 5, 5, 2014, lookup={ 'TZ': 'America/Edmonton' }.get )
    assert t.epoch_millis == 1399326141000
    with pytest.raises( InvalidZoneDescriptor ):
        from_components( 21, 42, 15, 5, 5, 2014, tz='Nowhere/Special' )


def test_components_fixed():
    t				= from_components( 0, 30, 9, 1, 1, 1970, utc_offset=34200 )
    assert t.epoch_millis == 0
    assert t.zone.name == '+09:30' and t.utc_offset() == 34200
    # An is_dst hint is irrelevant to a fixed offset
    assert from_components( 0, 30, 9, 1, 1, 1970, is_dst=1, utc_offset=34200 ).epoch_millis == 0
    assert from_components( 0, 0, 19, 31, 12, 1969, utc_offset=-18000 ).epoch_millis == 0


def test_components_utc():
    for is_dst in ( -1, 0, 1 ):
        t			= from_components( 0, 0, 0, 1, 1, 1970, is_dst=is_dst, from_utc=True )
        assert t.epoch_millis == 0 and t.zone is Zone.UTC
    assert from_components( 59, 59, 23, 31, 12, 1969, nanoseconds=500000000, from_utc=True,
                            utc_offset=0 ).epoch_millis == -500

    with pytest.raises( UnsupportedConfiguration ):
        from_components( 0, 0, 0, 1, 1, 1970, from_utc=True, utc_offset=3600 )
    for bad in ( 1.5, '3600', True ):
        with pytest.raises( UnsupportedConfiguration ):
            from_components( 0, 0, 0, 1, 1, 1970, utc_offset=bad )


def test_components_ambiguous():
    """The fall-back overlap happens twice; the is_dst hint picks one, defaulting to standard time."""
    edm				= resolve( 'America/Edmonton' )
    mdt				= from_components( 0, 30, 1, 2, 11, 2014, is_dst=1, tz=edm )
    mst				= from_components( 0, 30, 1, 2, 11, 2014, is_dst=0, tz=edm )
    assert mdt.epoch_millis == 1414913400000
    assert mst.epoch_millis == 1414917000000
    assert from_components( 0, 30, 1, 2, 11, 2014, tz=edm ) == mst
    assert decompose( mdt ).is_dst and not decompose( mst ).is_dst

    # The spring-ahead gap never happens; it is interpreted using the offset on one side
    assert from_components( 0, 30, 2, 9, 3, 2014, is_dst=0, tz=edm ).epoch_millis == 1394357400000
    assert from_components( 0, 30, 2, 9, 3, 2014, is_dst=1, tz=edm ).epoch_millis == 1394353800000


def test_components_invalid():
    for args,kwds in [
            (( 0, 0, 0, 1, 13, 2014 ),	{} ),
            (( 0, 0, 0, 0, 1, 2014 ),	{} ),
            (( 0, 0, 0, 29, 2, 2014 ),	{} ),
            (( 0, 0, 24, 1, 1, 2014 ),	{} ),
            (( 0, 60, 0, 1, 1, 2014 ),	{} ),
            (( 60, 0, 0, 1, 1, 2014 ),	{} ),
            (( -1, 0, 0, 1, 1, 2014 ),	{} ),
            (( 0, 0, 0, 1, 1, 2014 ),	{ 'nanoseconds': 1000000000 } ),
            (( 0, 0, 0, 1, 1, 2014 ),	{ 'is_dst': 2 } ),
            (( 0, 0, 0, 1, 1, 2014 ),	{ 'utc_offset': 86400 } ),
    ]:
        kwds.setdefault( 'from_utc', 'utc_offset' not in kwds )
        with pytest.raises( DomainError ):
            from_components( *args, **kwds )
    assert from_components( 0, 0, 0, 29, 2, 2012, from_utc=True ).epoch_millis == 1330473600000


def test_components_overflow():
    with pytest.raises( Overflow ):
        from_components( 59, 59, 23, 31, 12, 300000000, from_utc=True )
    with pytest.raises( OverflowError ):
        from_components( 0, 0, 0, 1, 1, -300000000, utc_offset=0 )
    assert from_components( 55, 12, 7, 17, 8, 292278994, nanoseconds=807000000,
                            from_utc=True ).epoch_millis == 2**63 - 1


def test_components_roundtrip():
    """Decomposing an Instant and reconstructing it from the fields reproduces the same Instant."""
    for descriptor,utc_offset in [ ( '+0930', 34200 ), ( '-05', -18000 ), ( 'UTC', 0 ) ]:
        for millis in ( 0, -1, -500, 1399326141999, 1414913400000, -62135596800000, 253402300799999 ):
            t			= Instant( millis, resolve( descriptor ))
            f			= decompose( t )
            r			= from_components( *f[:6], nanoseconds=t.fractional_nanoseconds(),
                                                   utc_offset=utc_offset )
            assert r.epoch_millis == millis, "%s @%d: %r" % ( descriptor, millis, f )

    # Named zones need the is_dst hint to disambiguate the fall-back overlap
    edm				= resolve( 'America/Edmonton' )
    for millis in ( 1399326141999, 1388559600000, 1414913400000, 1414917000000 ):
        t			= Instant( millis, edm )
        f			= decompose( t )
        r			= from_components( *f[:6], nanoseconds=t.fractional_nanoseconds(),
                                               is_dst=int( f.is_dst ), tz=edm )
        assert r == t


def test_components_utc_millis():
    t				= from_utc_millis( 1399326141, 999999999 )
    assert t.epoch_millis == 1399326141999 and t.zone is Zone.UTC
    assert from_utc_millis( -1, 500000000 ).epoch_millis == -500
    assert from_utc_millis( 0 ).epoch_millis == 0
    with pytest.raises( DomainError ):
        from_utc_millis( 0, 1000000000 )
    with pytest.raises( Overflow ):
        from_utc_millis( 2**62 )
