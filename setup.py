from setuptools import setup

# Version
version = None
with open("compositions/__init__.py", "r") as f:
    for line in f.readlines():
        line = line.strip()
        if line.startswith("__version__"):
            version = line.split("=")[-1].strip().strip('"')
assert version is not None, "Check version in compositions/__init__.py"

setup(
name='compositions',
    version=version,
    description='Log-ratio and planar transforms of compositional data in Python',
    url='https://github.com/jolespin/compositions',
    author='Josh L. Espinoza',
    author_email='jespinoz@jcvi.org',
    license='BSD-3',
    packages=["compositions"],
    python_requires=">=3.8",
    install_requires=[
        "pandas",
        "numpy",
        "scipy",
      ],
    extras_require={
        "test": [
            "pytest",
        ],
      },
)
