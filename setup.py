from setuptools import setup

import os

HERE				= os.path.dirname( os.path.abspath( __file__ ))

__version__			= None
__version_info__		= None
exec( open( os.path.join( HERE, 'version.py' ), 'r' ).read() )

console_scripts			= [
    'walltime		= walltime.main:main',
]

entry_points			= {
    'console_scripts': 		console_scripts,
}

def requirements( name ):
    # Remove whitespace, elide blank lines and comments
    return list(
        ''.join( r.split() )
        for r in open( os.path.join( HERE, name )).readlines()
        if r.strip() and not r.strip().startswith( '#' )
    )

install_requires		= requirements( "requirements.txt" )
tests_require			= requirements( "requirements-tests.txt" )

# Since setuptools is retiring tests_require, add it as an option
extras_require			= {
    'tests':			tests_require,
}

package_dir			= {
    "walltime":			".",
}

long_description		= """\
Walltime is a wall-clock time value engine: an instant (integer milliseconds
since the UNIX epoch) paired with a timezone, resolved from TZ-style
descriptors (zone names, numeric offsets, POSIX abbreviated offsets, tzfiles).

Instants may be captured from the clock, constructed from calendar components
at a fixed offset or in a DST-aware zone, decomposed into local calendar fields
(including the DST designation and zone abbreviation), and rendered via a
compiled strftime-style pattern to sub-second precision.
"""

classifiers			= [
    "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
    "License :: Other/Proprietary License",
    "Programming Language :: Python :: 3",
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Topic :: Software Development :: Libraries",
    "Topic :: Text Processing :: Filters"
]

setup(
    name			= "walltime",
    version			= __version__,
    install_requires		= install_requires,
    extras_require		= extras_require,
    packages			= list( package_dir.keys() ),
    package_dir			= package_dir,
    zip_safe			= False,
    entry_points		= entry_points,
    python_requires		= ">=3.7",
    author			= "Perry Kundert",
    author_email		= "perry@hardconsulting.com",
    description			= "Wall-clock time values with timezone resolution, decomposition and strftime rendering",
    long_description		= long_description,
    license			= "Dual License; GPLv3 and Proprietary",
    keywords			= "time timezone TZ strftime pytz",
    classifiers			= classifiers,
)
