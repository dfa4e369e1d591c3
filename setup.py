#!/usr/bin/env python
from setuptools import setup, find_packages


setup(
    name='xmlrpctypes',
    license='BSD',
    version='0.1.0',
    description='Typed XML-RPC encoding and decoding',
    packages=find_packages(exclude=['tests']),
    python_requires='>=3.8',
    install_requires=[
        'Django',
        'lxml',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Web Environment',
        'Framework :: Django',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: Text Processing :: Markup :: XML',
    ],
)
