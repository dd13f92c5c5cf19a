from nanograd.engine import Value, topological_sort, validate_graph
from nanograd.nn import MLP, Layer, Module, Neuron

__all__ = ["Value", "topological_sort", "validate_graph", "Module", "Neuron", "Layer", "MLP"]
