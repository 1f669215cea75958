from setuptools import setup, find_packages

setup(
    name='credkeep',
    version='0.1.0',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    python_requires='>=3.8',
    install_requires=[
        'click>=8.0.0',
        'cryptography>=41.0.0',
        'pydantic>=2.0',
        'pydantic-settings>=2.1',
        'pyperclip>=1.8.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'credkeep=credkeep.cli.commands:main',
        ],
    },
)
