import numpy as np
import pytest

from neuroship.core.errors import ConfigurationError, ShapeMismatch, StateError
from neuroship.core.layers import Layer, LayerSpec
from neuroship.core.network import Network, NetworkConfig, build_network
from neuroship.training.losses import REGISTRY as LOSS_REGISTRY
from neuroship.training.optimizers import GradientDescent


def _scenario_config(**overrides) -> NetworkConfig:
    params = dict(
        input_size=8,
        layers=(LayerSpec(4, "leaky_relu"), LayerSpec(4, "softmax")),
        output_size=4,
        learning_rate=0.03,
        init_low=0.0,
        init_high=1e-6,
    )
    params.update(overrides)
    return NetworkConfig(**params)


def test_scenario_output_is_a_distribution():
    network = build_network(_scenario_config(), rng=np.random.default_rng(42))
    out = network.evaluate(np.zeros(8))
    assert len(out) == 4
    assert abs(sum(out) - 1.0) < 1e-6


def test_single_update_pulls_index_zero_up():
    network = build_network(_scenario_config(), rng=np.random.default_rng(42))
    x = np.array([1.0, 0.0, 1.0, 0.0, 0.0, 1.0, 0.0, 0.0])
    before = network.evaluate(x)
    network.learn_from([1.0, 0.0, 0.0, 0.0])
    network.update_from_learning()
    after = network.evaluate(x)
    assert after[0] > before[0]


def test_repeated_training_reduces_loss():
    network = build_network(_scenario_config(), rng=np.random.default_rng(1))
    x = np.linspace(0.0, 1.0, 8)
    expected = np.array([0.0, 1.0, 0.0, 0.0])
    initial = network.loss(x, expected)
    for _ in range(60):
        network.evaluate(x)
        network.learn_from(expected)
        network.update_from_learning()
    assert network.loss(x, expected) < initial


@pytest.mark.parametrize("hidden", [[3], [5, 2], []])
def test_output_length_matches_declared_size(hidden):
    layers = tuple(LayerSpec(h, "leaky_relu") for h in hidden) + (LayerSpec(6, "softmax"),)
    network = build_network(
        NetworkConfig(input_size=5, layers=layers, output_size=6),
        rng=np.random.default_rng(0),
    )
    assert len(network.evaluate(np.ones(5))) == 6
    assert network.topology()[-1][0] == 6


def test_construction_errors():
    with pytest.raises(ConfigurationError):
        build_network(NetworkConfig(input_size=4, layers=()))
    with pytest.raises(ConfigurationError):
        build_network(NetworkConfig(input_size=0, layers=(LayerSpec(2, "softmax"),)))
    with pytest.raises(ConfigurationError):
        LayerSpec(0, "leaky_relu")
    with pytest.raises(ShapeMismatch):
        build_network(_scenario_config(output_size=5))
    with pytest.raises(ConfigurationError):
        build_network(_scenario_config(cost="cross_entropy"))

    first = Layer(3, 2, "leaky_relu", np.zeros((2, 3)), np.zeros(2))
    second = Layer(4, 1, "softmax", np.zeros((1, 4)), np.zeros(1))
    with pytest.raises(ShapeMismatch):
        Network([first, second], cost=LOSS_REGISTRY.get("mse"), optimizer=GradientDescent(0.1))
    with pytest.raises(ShapeMismatch):
        Layer(3, 2, "leaky_relu", np.zeros((3, 2)), np.zeros(2))


def test_shape_and_order_errors():
    network = build_network(_scenario_config(), rng=np.random.default_rng(0))
    with pytest.raises(ShapeMismatch):
        network.evaluate(np.zeros(7))
    with pytest.raises(StateError):
        network.learn_from([1.0, 0.0, 0.0, 0.0])
    with pytest.raises(StateError):
        network.update_from_learning()

    network.evaluate(np.zeros(8))
    with pytest.raises(ShapeMismatch):
        network.learn_from([1.0, 0.0, 0.0])
    network.learn_from([1.0, 0.0, 0.0, 0.0])
    with pytest.raises(StateError):
        network.learn_from([1.0, 0.0, 0.0, 0.0])
    network.update_from_learning()
    with pytest.raises(StateError):
        network.update_from_learning()


def test_layer_backward_requires_context():
    layer = Layer(2, 2, "leaky_relu", np.eye(2), np.zeros(2))
    with pytest.raises(StateError):
        layer.backward(None, np.ones(2))


def test_backprop_matches_finite_differences():
    config = _scenario_config(init_low=-0.5, init_high=0.5)
    network = build_network(config, rng=np.random.default_rng(5))
    x = np.random.default_rng(6).uniform(-1.0, 1.0, size=8)
    expected = np.array([0.0, 0.0, 1.0, 0.0])

    _, trace = network.forward(x)
    network.backward(trace, expected)
    analytic = [(g.weights.copy(), g.bias.copy()) for g in network._accumulated]

    eps = 1e-6
    for idx, layer in enumerate(network.layers):
        for (r, c) in [(0, 0), (1, 2), (layer.output_size - 1, layer.input_size - 1)]:
            original = layer.weights[r, c]
            layer.weights[r, c] = original + eps
            plus = network.loss(x, expected)
            layer.weights[r, c] = original - eps
            minus = network.loss(x, expected)
            layer.weights[r, c] = original
            numeric = (plus - minus) / (2 * eps)
            assert numeric == pytest.approx(analytic[idx][0][r, c], rel=1e-4, abs=1e-8)
        original = layer.bias[0]
        layer.bias[0] = original + eps
        plus = network.loss(x, expected)
        layer.bias[0] = original - eps
        minus = network.loss(x, expected)
        layer.bias[0] = original
        numeric = (plus - minus) / (2 * eps)
        assert numeric == pytest.approx(analytic[idx][1][0], rel=1e-4, abs=1e-8)


def test_learning_accumulates_until_update():
    network = build_network(_scenario_config(init_low=-0.1, init_high=0.1), rng=np.random.default_rng(2))
    x = np.ones(8)
    expected = np.array([1.0, 0.0, 0.0, 0.0])
    reference = network.state_dict()

    network.evaluate(x)
    network.learn_from(expected)
    network.evaluate(x)
    network.learn_from(expected)
    assert all(np.array_equal(v, network.state_dict()[k]) for k, v in reference.items())

    single = build_network(_scenario_config(init_low=-0.1, init_high=0.1), rng=np.random.default_rng(2))
    _, trace = single.forward(x)
    single.backward(trace, expected)
    grad_bias = single._accumulated[-1].bias.copy()

    network.update_from_learning()
    assert np.allclose(network.layers[-1].bias, reference["b1"] - 0.03 * 2 * grad_bias)
