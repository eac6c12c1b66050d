import pathlib
import setuptools


HERE = pathlib.Path(__file__).parent

README = (HERE/'README.md').read_text()

setuptools.setup(
    name='roster_sync',
    version='1.0',
    description='Reconciles a school\'s student master list with a remote '
                'account directory and provisions new accounts.',
    long_description=README,
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python'
    ],
    packages=setuptools.find_packages(exclude=('tests', 'tests.*')),
    install_requires=['requests'],
    extras_require={'test': ['responses']},
    python_requires=">=3.8"
)
