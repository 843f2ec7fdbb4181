from .index import Index
from .comparative_advantage import rca, apply_rca, fair_share, apply_fair_share, apply_fair_share_into
from .aggregate import Aggregation, AverageDivisor, aggregate
from .relatedness import proximity, density, distance, proximity_network, plot_network
from .complexity import eci_pci
from .views import Rca, Proximity, Density, Distance, Complexity
from .space import ProductSpace
from .ingest import read_observations, build_matrices, product_space_from_file
from .errors import ProductSpaceError, UnknownNameError, IngestionError
