from setuptools import setup, find_packages
import re

# Read version from payslip/__init__.py
with open('payslip/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='payslip-calc',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'payslip=payslip.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Progressive income tax and monthly payslip calculations.',
    python_requires='>=3.10',
)
