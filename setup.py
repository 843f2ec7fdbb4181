from setuptools import setup, find_packages

setup(
    name="product-space",
    version="0.1.0",
    description="Revealed comparative advantage, proximity, density and complexity of the product space",
    author="product-space contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "scipy",
        "pandas",
        "networkx",
        "bokeh>=3.4",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["product-space=product_space.cli:main"],
    },
    python_requires=">=3.8",
)
