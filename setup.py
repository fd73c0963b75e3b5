"""A setuptools based setup module."""

from os import path

from setuptools import setup, find_packages

HERE = path.abspath(path.dirname(__file__))
with open(path.join(HERE, 'README.md'), encoding='utf-8') as file:
    LONG_DESCRIPTION = file.read()

setup(
    name='driveway-review',
    version='0.0.1',
    description=('Extract private driveways added by known editors from an '
                 'osm archive for manual review.'),
    long_description=LONG_DESCRIPTION,
    long_description_content_type='text/markdown',
    classifiers=[  # https://pypi.org/classifiers/
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Topic :: Scientific/Engineering :: GIS'
    ],
    keywords='openstreetmap osm pbf josm review',
    packages=find_packages(exclude=['contrib', 'docs', 'tests']),
    python_requires='>=3.9, <4',
    install_requires=[
        'dataslots>=1.0.2,<1.1',
        'osmium>=3.2.0'
    ],
    extras_require={
        'dev': [
            'flake8',
            'ipython',
            'isort',
            'pycodestyle',
            'pydocstyle',
            'pylint',
            'radon'
        ],
        'test': [
            'pytest'
        ]
    },
    entry_points={
        'console_scripts': [
            'driveway-review = driveway_review:main'
        ]
    }
)
