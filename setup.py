from setuptools import setup, find_packages

setup(
    name='lgmath',
    version='1.0.0',
    description='Lie group math for SO(3) rotations and SE(3) rigid body transformations',
    packages=find_packages(include=['lgmath', 'lgmath.*']),
    python_requires='>=3.11',
    install_requires=['numpy>=1.24', 'scipy>=1.10'],
    extras_require={'test': ['pytest']},
)
