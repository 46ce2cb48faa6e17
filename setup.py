from setuptools import setup, find_packages

with open('requirements.txt') as f:
    required = f.read().splitlines()

setup(
    name = 'mediaprovider-config',
    version = '0.1.0',
    description = 'Typed, validated and persisted settings for metadata provider plugins',
    packages = find_packages(include=['mediaprovider', 'mediaprovider.*']),
    python_requires = '>=3.10',
    install_requires = required,
    extras_require = {
        'test': ['pytest>=7.0', 'pytest-cov>=4.0'],
    },
)
