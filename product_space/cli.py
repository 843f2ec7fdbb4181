import argparse
import sys
import time
from contextlib import contextmanager

from product_space.errors import ProductSpaceError
from product_space.ingest import product_space_from_file
from product_space.log import get_logger, setup_logging

logger = get_logger(__name__)


@contextmanager
def timed(label: str):
    start = time.perf_counter()
    yield
    logger.info("%s: %.3fs", label, time.perf_counter() - start)


def run(args) -> int:
    with timed("ingest and build product space"):
        ps = product_space_from_file(args.filepath, cutoff=args.cutoff, sep=args.sep)

    years = args.year or list(ps.years[-3:])
    if not years:
        print("No years in input.")
        return 1
    country, product = args.country, args.product

    print(f"\n## {country}::{product} rca\n")
    with timed(f"rca 1yr, x{len(years)}"):
        for year in years:
            rca = ps.rca(year)
            if rca is None:
                print(f"no rca for {year}")
                return 1
            print(f"{country}::{product}, {year}: {rca.get(country, product)}")

    label = f"{years[0]}-{years[-1]}"
    with timed(f"rca {len(years)}yr cutoff {ps.cutoff}"):
        rca = ps.rca(years, ps.cutoff)
        print(f"{country}::{product}, {label}, all years above cutoff: {rca.get(country, product)}")

    print(f"\n## {country}::{product} density\n")
    with timed(f"density 1yr, x{len(years)}"):
        for year in years:
            density = ps.density(year)
            print(f"{country}::{product}, {year}: {density.get(country, product)}")

    with timed(f"density {len(years)}yr"):
        density = ps.density(years)
        print(f"{country}::{product}, {label}: {density.get(country, product)}")

    print(f"\n## complexity {label}\n")
    with timed("complexity"):
        complexity = ps.complexity(years)
        print(f"ECI {country}: {complexity.eci(country)}")
        print(f"PCI {product}: {complexity.pci(product)}")

    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Product space indicators from yearly export observations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Reads a delimited file with origin, hs92, year and export_val columns
(NULL marks a missing value) and prints RCA, density and complexity
for one country and product.

Example:
  product-space exports.tsv --year 2015 --year 2016 --year 2017 --country usa --product 0101
"""
    )
    parser.add_argument('filepath', help='Observations file (.tsv or .csv)')
    parser.add_argument('--year', type=int, action='append',
                        help='Year to report, repeatable (default: last three years)')
    parser.add_argument('--cutoff', type=float, default=None, help='RCA cutoff (default: 1.0)')
    parser.add_argument('--country', default='usa', help='Country to report (default: usa)')
    parser.add_argument('--product', default='0101', help='Product to report (default: 0101)')
    parser.add_argument('--sep', default=None, help='Field separator (default: from extension)')
    parser.add_argument('--log-level', default=None, help='Logging level (default: INFO)')

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        return run(args)
    except ProductSpaceError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
