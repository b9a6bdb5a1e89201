from setuptools import setup
import os
import re


def read_version(this_directory):
    with open(os.path.join(this_directory, 'cellcycle', '_version.py')) as f:
        return re.search(r"^__version__ = '([^']+)'", f.read(),
                         re.MULTILINE).group(1)


def main():
    this_directory = os.path.abspath(os.path.dirname(__file__))
    with open(os.path.join(this_directory, 'README.rst'), 'r') as f:
        long_description = f.read()

    setup(name='cellcycle',
          version=read_version(this_directory),
          description='Hybrid continuous/discrete cell cycle simulation',
          long_description=long_description,
          long_description_content_type='text/x-rst',
          packages=['cellcycle', 'cellcycle.examples', 'cellcycle.simulator',
                    'cellcycle.tests'],
          python_requires='>=3.6',
          install_requires=['numpy', 'scipy>=1.1', 'sympy>=1.6', 'networkx'],
          extras_require={'pandas': ['pandas'],
                          'test': ['pytest', 'pandas']},
          keywords=['systems', 'biology', 'cell cycle', 'simulation'],
          classifiers=[
            'Development Status :: 3 - Alpha',
            'Environment :: Console',
            'Intended Audience :: Science/Research',
            'Operating System :: OS Independent',
            'Programming Language :: Python :: 3',
            'Topic :: Scientific/Engineering :: Bio-Informatics',
            'Topic :: Scientific/Engineering :: Mathematics',
            ],
          )


if __name__ == '__main__':
    main()
