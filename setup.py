from setuptools import setup, find_packages
import re

# Read version from pensumcalc/__init__.py
with open('pensumcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='pensum-calc',
    version=version,
    packages=find_packages(include=['pensumcalc', 'pensumcalc.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'pensum-calc=pensumcalc.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Teacher workload and payroll calculation.',
    python_requires='>=3.10',
)
