from setuptools import setup
from pathlib import Path

root_dir = Path(__file__).parent # petspack root directory
readme = (root_dir / 'README.md').read_text()

setup(name='petspack'
	,version='v0.1.0'
	,description='The PeTS equation of state and Helmholtz energy functional for the truncated and shifted Lennard-Jones fluid'
	,long_description=readme
	,long_description_content_type='text/markdown'
	,author='Vegard Gjeldvik Jervell'
	,author_email='vegard.g.jervell@ntnu.no'
	,packages=['petspack']
	,python_requires='>=3.8'
    ,install_requires=['numpy>=1.22',
                       'jax>=0.4.14',
                       'scipy>=1.7']
	,extras_require={'test': ['pytest']}
	)
