"""
Packaging for linerelay, an interactive line-oriented TCP client.

Install with `pip install -e .[test]`, then run the tests with `pytest src`.
"""

from setuptools import setup

setup(
    name='linerelay',
    version='0.1.0',
    description='Relay lines between the terminal and a TCP endpoint.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    package_dir={'': 'src'},
    packages=['linerelay', 'linerelay.conduit', 'linerelay.config', 'linerelay.connector',
              'linerelay.protocol', 'linerelay.support'],
    package_data={'linerelay.config': ['*.cfg']},
    python_requires='>=3.8',
    install_requires=[
        'configobj>=5.0.9',
    ],
    extras_require={
        'test': [
            'pytest',
            'PyHamcrest',
            'timeout-decorator',
        ],
    },
    entry_points={
        'console_scripts': [
            'linerelay=linerelay.cli:main',
        ],
    },
    zip_safe=False,
)
