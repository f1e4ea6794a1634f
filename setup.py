from setuptools import setup, find_packages

setup(
    name='lmsr-market-engine',
    version='0.1.0',
    packages=find_packages(include=['lmsr_market', 'lmsr_market.*']),
    install_requires=[
        'mpmath',
        'numpy',
        'python-dotenv',
        'typing_extensions',
    ],
    extras_require={
        'scripts': [
            'matplotlib',
            'pandas',
        ],
        'test': [
            'matplotlib',
            'pandas',
            'pytest',
        ],
    },
    description='Deterministic Python engine for binary prediction markets priced by an LMSR automated market maker, with fixed-point math, snapshot quoting, resolution and settlement.',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.11',
)
