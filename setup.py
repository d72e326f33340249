"""
Setup configuration for fluid_cooler package.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / 'README.md'
long_description = readme_path.read_text() if readme_path.exists() else ''

setup(
    name='fluid-cooler',
    version='1.0.0',
    description='Steady-state dry fluid cooler model for condenser loop simulation',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Plant Simulation Team',

    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'fluid_cooler.config': ['schemas/*.json', 'examples/*.yaml', 'examples/*.csv'],
    },

    install_requires=[
        'numpy>=1.21.0',
        'numba>=0.55.0',
        'scipy>=1.8.0',
        'CoolProp>=6.4.0',
        'pydantic>=2.0',
        'pyyaml>=6.0',
        'jsonschema>=4.0.0',
        'pandas>=1.4.0',
    ],

    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=3.0.0',
        ],
    },

    entry_points={
        'console_scripts': [
            'fluid-cooler-simulate=fluid_cooler.simulation.runner:main',
        ],
    },

    python_requires='>=3.10',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
