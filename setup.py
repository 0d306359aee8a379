from setuptools import setup
from setuptools import find_packages

config = {
    'name' : 'featherstone',
    'version' : '0.1.0',
    'description' : 'Articulated-body inertia propagation for trees of one degree of freedom joints',
    'install_requires' : [
        'numpy',
        'scipy',
        'prettytable',
        'pptree'
    ],
    'extras_require' : {
        'test' : ['pytest'],
    },
    'python_requires' : '>=3.8',
    'package_dir' : {'': 'src'},
    'packages' : find_packages('src'),
}

setup(**config)
