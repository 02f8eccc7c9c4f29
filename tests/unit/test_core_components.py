import numpy as np
import pytest

from neuroship.core.activations import (
    ActivationKind,
    LeakyReLU,
    Softmax,
    get_activation,
)
from neuroship.core.errors import ConfigurationError, ShapeMismatch
from neuroship.core.initializers import RandomUniform, make_initializer
from neuroship.training.losses import REGISTRY as LOSS_REGISTRY
from neuroship.training.optimizers import GradientDescent, make_optimizer


def test_leaky_relu_identity_and_slope():
    act = LeakyReLU(alpha=0.01)
    x = np.array([-3.0, -0.5, 0.0, 0.25, 4.0])
    out = act.forward(x)
    assert np.allclose(out[x >= 0], x[x >= 0])
    assert np.allclose(out[x < 0], 0.01 * x[x < 0])

    upstream = np.ones_like(x)
    grad = act.backward(x, out, upstream)
    assert np.allclose(grad, [0.01, 0.01, 1.0, 1.0, 1.0])


def test_softmax_range_sum_and_stability():
    act = Softmax()
    rng = np.random.default_rng(0)
    for _ in range(20):
        x = rng.uniform(-5.0, 5.0, size=7)
        s = act.forward(x)
        assert np.all(s > 0.0) and np.all(s < 1.0)
        assert abs(s.sum() - 1.0) < 1e-6
    big = act.forward(np.array([1000.0, 1000.0]))
    assert np.allclose(big, [0.5, 0.5])


def test_softmax_backward_matches_jacobian():
    act = Softmax()
    x = np.array([0.3, -1.2, 2.0, 0.0])
    s = act.forward(x)
    g = np.array([0.5, -0.25, 1.0, 0.1])
    jacobian = np.diag(s) - np.outer(s, s)
    assert np.allclose(act.backward(x, s, g), jacobian.T @ g)


def test_get_activation_resolves_identifiers():
    assert isinstance(get_activation("leaky_relu"), LeakyReLU)
    assert isinstance(get_activation(ActivationKind.SOFTMAX), Softmax)
    with pytest.raises(ConfigurationError):
        get_activation("tanh")


def test_mse_cost_and_gradient():
    mse = LOSS_REGISTRY.get("mse")
    pred = np.array([0.5, 0.0, 1.0, 0.5])
    target = np.array([1.0, 0.0, 0.0, 0.5])
    cost, grad = mse(pred, target)
    assert cost == pytest.approx((0.25 + 1.0) / 4)
    assert np.allclose(grad, 2.0 / 4 * (pred - target))
    with pytest.raises(ShapeMismatch):
        mse(pred, target[:3])
    with pytest.raises(ConfigurationError):
        LOSS_REGISTRY.get("hinge")


def test_gradient_descent_step():
    opt = GradientDescent(learning_rate=0.03)
    p = np.array([[1.0, -2.0], [0.5, 0.0]])
    g = np.array([[0.1, 0.2], [-1.0, 3.0]])
    updated = opt.step(p, g)
    assert np.allclose(updated, p - 0.03 * g)
    assert p[0, 0] == 1.0
    with pytest.raises(ShapeMismatch):
        opt.step(p, g[0])
    with pytest.raises(ConfigurationError):
        GradientDescent(learning_rate=0.0)
    with pytest.raises(ConfigurationError):
        make_optimizer("adam", 0.01)


def test_random_uniform_is_seeded_and_bounded():
    first = RandomUniform(0.0, 1e-6, rng=np.random.default_rng(3)).init(4, 8)
    second = make_initializer("random_uniform", 0.0, 1e-6, np.random.default_rng(3)).init(4, 8)
    weights, bias = first
    assert weights.shape == (4, 8) and bias.shape == (4,)
    assert np.all(weights >= 0.0) and np.all(weights < 1e-6)
    assert np.array_equal(weights, second[0]) and np.array_equal(bias, second[1])
    with pytest.raises(ConfigurationError):
        RandomUniform(1.0, 1.0)
