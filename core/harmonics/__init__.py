"""
core/harmonics/ — Pure recursive harmonic structure engine.

Exports:
    Types:      TuningMode, Leaf, Branch, HarmonicStructure, FrequencyRecord,
                ProximityPair, RatioApproximation, NodeKind, TreeNode,
                VisibleNode, NodeMatch, ConfigurationError
    Tuning:     generate_frequencies, JUST_INTONATION_RATIOS, EQUAL_TEMPERAMENT_RATIOS
    Structure:  build_structure, validate_shape, MAX_DEPTH
    Paths:      flatten_structure, format_label
    Proximity:  find_close_pairs, find_close_nodes, relative_difference
    Ratios:     approximate_ratios, closest_fraction
    Tree:       TreeModel, node_id
    Layout:     layout_nodes, compute_spacing, LayoutConfig, DEFAULT_LAYOUT
    Views:      frequency_distribution, group_frequency_sets, phase_space_points

analyze() and HarmonicAnalysis live in core.harmonics.analysis; they depend on
core.config, which itself imports from this package.
"""

from core.harmonics.distribution import DistributionBin, frequency_distribution
from core.harmonics.errors import ConfigurationError
from core.harmonics.frequency_sets import FrequencySet, group_frequency_sets
from core.harmonics.layout import DEFAULT_LAYOUT, LayoutConfig, compute_spacing, layout_nodes
from core.harmonics.paths import flatten_structure, format_label
from core.harmonics.phase_space import PhaseSpacePoint, diagonal_reference, phase_space_points
from core.harmonics.proximity import find_close_nodes, find_close_pairs, relative_difference
from core.harmonics.ratios import approximate_ratios, closest_fraction
from core.harmonics.structure import MAX_DEPTH, build_structure, validate_shape
from core.harmonics.tree import ROOT_ID, TreeModel, node_id
from core.harmonics.tuning import (
    EQUAL_TEMPERAMENT_RATIOS,
    JUST_INTONATION_RATIOS,
    generate_frequencies,
)
from core.harmonics.types import (
    Branch,
    FrequencyRecord,
    HarmonicStructure,
    Leaf,
    NodeKind,
    NodeMatch,
    ProximityPair,
    RatioApproximation,
    TreeNode,
    TuningMode,
    VisibleNode,
)

__all__ = [
    # Types
    "TuningMode",
    "Leaf",
    "Branch",
    "HarmonicStructure",
    "FrequencyRecord",
    "ProximityPair",
    "RatioApproximation",
    "NodeKind",
    "TreeNode",
    "VisibleNode",
    "NodeMatch",
    "ConfigurationError",
    # Tuning
    "generate_frequencies",
    "JUST_INTONATION_RATIOS",
    "EQUAL_TEMPERAMENT_RATIOS",
    # Structure
    "build_structure",
    "validate_shape",
    "MAX_DEPTH",
    # Paths
    "flatten_structure",
    "format_label",
    # Proximity
    "find_close_pairs",
    "find_close_nodes",
    "relative_difference",
    # Ratios
    "approximate_ratios",
    "closest_fraction",
    # Tree
    "TreeModel",
    "node_id",
    "ROOT_ID",
    # Layout
    "layout_nodes",
    "compute_spacing",
    "LayoutConfig",
    "DEFAULT_LAYOUT",
    # Views
    "frequency_distribution",
    "DistributionBin",
    "group_frequency_sets",
    "FrequencySet",
    "phase_space_points",
    "diagonal_reference",
    "PhaseSpacePoint",
]
