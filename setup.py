# setup.py
from setuptools import setup, find_packages

setup(
    name='pyweave',
    version='0.1.0',
    description='Build native widget trees from declarative Python and YAML descriptions.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',

    # finds `pyweave` and `pyweave_cli`
    packages=find_packages(include=['pyweave', 'pyweave.*', 'pyweave_cli', 'pyweave_cli.*']),
    include_package_data=True,

    install_requires=[
        'PySide6',
        'typer[all]',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },

    # `pyweave` executable calling the `app` object inside `pyweave_cli.main`.
    entry_points={
        'console_scripts': [
            'pyweave = pyweave_cli.main:app',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: User Interfaces',
    ],
    python_requires='>=3.10',
)
