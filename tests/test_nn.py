import numpy as np
import pytest

from nanograd.engine import Value
from nanograd.nn import MLP, Layer, Module, Neuron


def _param_count(nin, nouts):
    sizes = [nin] + nouts
    return sum((sizes[i] + 1) * sizes[i + 1] for i in range(len(nouts)))


def test_neuron_weighted_sum():
    n = Neuron(2, nonlin=False)
    n.w[0].data, n.w[1].data, n.b.data = 0.5, -2.0, 1.0
    out = n([Value(2.0), Value(3.0)])
    assert out.data == pytest.approx(0.5 * 2.0 - 2.0 * 3.0 + 1.0)


def test_neuron_relu_clamps():
    n = Neuron(1)
    n.w[0].data = -1.0
    out = n([Value(3.0)])
    assert out.data == 0.0
    out.backward()
    assert n.w[0].grad == 0.0


def test_neuron_gradients_reach_parameters():
    n = Neuron(2, nonlin=False)
    x = [Value(2.0), Value(-1.0)]
    out = n(x)
    out.backward()
    assert n.w[0].grad == 2.0
    assert n.w[1].grad == -1.0
    assert n.b.grad == 1.0
    assert x[0].grad == n.w[0].data


def test_neuron_accepts_plain_floats():
    n = Neuron(2, nonlin=False)
    n.w[0].data, n.w[1].data = 1.0, 1.0
    assert n([1.0, 2.0]).data == pytest.approx(3.0)


def test_neuron_forward_builds_new_node():
    n = Neuron(2)
    x = [Value(1.0), Value(1.0)]
    assert n(x) is not n(x)


@pytest.mark.parametrize("inputs", [[Value(1.0)], [Value(1.0), Value(2.0), Value(3.0)], []])
def test_neuron_input_mismatch(inputs):
    n = Neuron(2)
    with pytest.raises(ValueError) as e:
        n(inputs)
    assert "mismatch" in str(e.value).lower()


def test_neuron_parameters_order():
    n = Neuron(3)
    params = n.parameters()
    assert params[:3] == n.w
    assert params[-1] is n.b
    assert n.b.data == 0.0
    assert all(-1.0 <= w.data <= 1.0 for w in n.w)


def test_layer_output_width():
    layer = Layer(3, 4)
    out = layer([Value(0.1), Value(0.2), Value(0.3)])
    assert isinstance(out, list)
    assert len(out) == 4


def test_layer_single_neuron_still_returns_list():
    out = Layer(2, 1)([Value(1.0), Value(1.0)])
    assert isinstance(out, list) and len(out) == 1


def test_layer_input_mismatch():
    with pytest.raises(ValueError) as e:
        Layer(3, 2)([Value(1.0)])
    assert "mismatch" in str(e.value).lower()


def test_layer_shares_activation():
    layer = Layer(2, 5, nonlin=False)
    assert all(not n.nonlin for n in layer.neurons)


def test_mlp_activation_policy():
    model = MLP(2, [4, 4, 1])
    hidden, output = model.layers[:-1], model.layers[-1]
    assert all(n.nonlin for layer in hidden for n in layer.neurons)
    assert all(not n.nonlin for n in output.neurons)


def test_mlp_weights_follow_seed_env(monkeypatch):
    monkeypatch.setenv("NANOGRAD_SEED", "5")
    a = MLP(2, [3, 1])
    b = MLP(2, [3, 1])
    assert [p.data for p in a.parameters()] == [p.data for p in b.parameters()]
    # one shared generator: neurons do not all start from the same draw
    weights = [n.w[0].data for n in a.layers[0].neurons]
    assert len(set(weights)) == len(weights)


def test_layer_and_neuron_follow_seed_env(monkeypatch):
    monkeypatch.setenv("NANOGRAD_SEED", "11")
    assert [p.data for p in Layer(3, 2).parameters()] == [p.data for p in Layer(3, 2).parameters()]
    assert [p.data for p in Neuron(4).parameters()] == [p.data for p in Neuron(4).parameters()]


def test_unseeded_networks_differ(monkeypatch):
    monkeypatch.delenv("NANOGRAD_SEED", raising=False)
    a = MLP(2, [3, 1])
    b = MLP(2, [3, 1])
    assert [p.data for p in a.parameters()] != [p.data for p in b.parameters()]


def test_mlp_single_output():
    model = MLP(2, [16, 16, 1])
    out = model.forward([Value(1.0), Value(-1.0)])
    assert len(out) == 1
    assert isinstance(out[0], Value)


@pytest.mark.parametrize("nin, nouts", [(2, [16, 16, 1]), (3, [4, 4, 1]), (1, [1]), (5, [3, 2])])
def test_mlp_parameter_count(nin, nouts):
    model = MLP(nin, nouts)
    assert len(model.parameters()) == _param_count(nin, nouts)


def test_mlp_parameter_order_is_stable():
    model = MLP(2, [3, 1])
    expected = []
    for layer in model.layers:
        for n in layer.neurons:
            expected.extend(n.w)
            expected.append(n.b)
    params = model.parameters()
    assert all(p is q for p, q in zip(params, expected))
    assert all(p is q for p, q in zip(params, model.parameters()))


def test_mlp_input_mismatch():
    with pytest.raises(ValueError):
        MLP(2, [3, 1])([Value(1.0)])


def test_mlp_zero_grad():
    model = MLP(2, [4, 1])
    out = model([Value(1.0), Value(2.0)])[0]
    (out * out).backward()
    model.zero_grad()
    assert all(p.grad == 0.0 for p in model.parameters())


def test_mlp_seeded_rng_reproducible():
    a = MLP(3, [4, 2], rng=np.random.default_rng(7))
    b = MLP(3, [4, 2], rng=np.random.default_rng(7))
    assert [p.data for p in a.parameters()] == [p.data for p in b.parameters()]


def test_module_defaults():
    m = Module()
    assert m.parameters() == []
    m.zero_grad()
    with pytest.raises(NotImplementedError):
        m([])


def test_repr():
    model = MLP(2, [2, 1])
    assert repr(model) == "MLP of [Layer of [ReLUNeuron(2), ReLUNeuron(2)], Layer of [LinearNeuron(2)]]"
