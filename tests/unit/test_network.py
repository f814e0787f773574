import numpy as np
import pytest

from backpropnet.core.activations import logistic
from backpropnet.core.errors import ConfigurationError, TopologyError, WeightShapeError
from backpropnet.training.network import Network

# Row sums 0.75 and 3.0; the second one drives the only functional output.
KNOWN_WEIGHTS = [np.array([[0.5, 0.25], [1.0, 2.0]], dtype=np.float32)]


@pytest.mark.parametrize("topology", [[1, 1], [2, 3, 1], [4, 4, 4, 4], [5, 2]])
def test_layer_and_weight_shapes(topology):
    net = Network(topology, seed=0)
    layers = net.activations
    weights = net.weights
    assert len(layers) == len(topology)
    assert len(weights) == len(topology) - 1
    for size, layer in zip(topology, layers):
        assert layer.shape == (size + 1,)
    for idx, W in enumerate(weights):
        assert W.shape == (topology[idx] + 1, topology[idx + 1] + 1)
    assert net.parameter_count() == sum(w.size for w in weights)
    assert net.describe().topology == list(topology)


@pytest.mark.parametrize("topology", [[], [3], [2, 0], [2, -1], [2, 1.5], [True, 2]])
def test_invalid_topology_is_rejected(topology):
    with pytest.raises(TopologyError):
        Network(topology)


def test_topology_error_is_a_configuration_error():
    with pytest.raises(ValueError):
        Network([4])
    assert issubclass(WeightShapeError, ConfigurationError)


def test_random_weights_follow_the_initialisation_rule():
    allowed = {np.float32(0.4 / k) for k in range(1, 11)}
    for W in Network([3, 4, 2], seed=5).weights:
        assert set(np.unique(W)) <= allowed


def test_seeded_construction_is_reproducible():
    first = Network([3, 4, 2], seed=11).weights
    second = Network([3, 4, 2], rng=np.random.default_rng(11)).weights
    for a, b in zip(first, second):
        assert np.array_equal(a, b)


def test_supplied_weights_round_trip():
    supplied = [
        np.array([[0.5, -1.0, 2.0], [0.125, 3.0, 0.25]]),
        [[1.0, 0.5], [0.25, -0.5], [2.0, 4.0]],
    ]
    net = Network([1, 2, 1], weights=supplied)
    for got, want in zip(net.weights, supplied):
        assert np.array_equal(got, np.asarray(want, dtype=np.float32))

    copy = net.weights
    copy[0][0, 0] = 99.0
    assert net.weights[0][0, 0] == 0.5
    assert set(net.state_dict()) == {"W0", "W1"}


def test_supplied_weights_shape_mismatch():
    with pytest.raises(WeightShapeError):
        Network([1, 1], weights=[np.zeros((2, 3))])
    with pytest.raises(WeightShapeError):
        Network([1, 1], weights=[np.zeros((2, 2)), np.zeros((2, 2))])


def test_forward_uses_row_sum_combinator():
    net = Network([1, 1], weights=KNOWN_WEIGHTS)
    out = net.evaluate([0.5])
    assert out.shape == (2,)
    assert out[0] == 0.0
    assert out[1] == pytest.approx(float(logistic(np.float32(1.5))), rel=1e-6)

    # A conventional product (W^T x) would squash 1.25 instead of 1.5.
    conventional = logistic(KNOWN_WEIGHTS[0].T @ np.array([1.0, 0.5], dtype=np.float32))
    assert not np.isclose(out[1], conventional[1])


def test_evaluate_is_deterministic_and_pins_bias_slots():
    net = Network([2, 3, 2], seed=3)
    first = net.evaluate([0.1, 0.9])
    second = net([0.1, 0.9])
    assert np.array_equal(first, second)
    layers = net.activations
    for layer in layers[:-1]:
        assert layer[0] == 1.0
    assert layers[-1][0] == 0.0
    assert np.array_equal(net.output, first)


def test_evaluate_returns_a_copy():
    net = Network([1, 1], seed=0)
    out = net.evaluate([0.3])
    out[1] = -5.0
    assert net.output[1] != -5.0


def test_evaluate_rejects_wrong_stimulus_length():
    net = Network([2, 2], seed=0)
    with pytest.raises(ValueError):
        net.evaluate([0.1, 0.2, 0.3])


def test_output_error_is_residual_times_slope():
    net = Network([1, 1], weights=KNOWN_WEIGHTS)
    out = net.evaluate([0.5])
    errors = net.backpropagate([0.0, 1.0])
    assert len(errors) == 1
    expected = (np.array([0.0, 1.0]) - out) * out * (1.0 - out)
    assert np.allclose(errors[0], expected)
    assert errors[0][0] == 0.0


def test_output_error_rejects_unaugmented_desired():
    net = Network([1, 1], seed=0)
    net.evaluate([0.5])
    with pytest.raises(ValueError):
        net.output_error([1.0])


def test_hidden_errors_propagate_through_row_sums():
    net = Network([2, 2, 2], seed=7)
    net.evaluate([0.2, 0.6])
    desired = np.array([0.0, 0.9, 0.1], dtype=np.float32)
    errors = net.backpropagate(desired)
    weights = net.weights
    layers = net.activations
    out = layers[2]
    out_err = (desired - out) * out * (1.0 - out)
    hidden = weights[1].sum(axis=1) * out_err * out * (1.0 - out)
    assert np.allclose(errors[1], out_err)
    assert np.allclose(errors[0], hidden, atol=1e-7)


def test_mixed_layer_sizes_keep_vector_lengths():
    net = Network([2, 3, 1], seed=1)
    out = net.evaluate([0.4, 0.7])
    assert out.shape == (2,)
    errors = net.backpropagate([0.0, 0.8])
    assert [e.shape[0] for e in errors] == [4, 2]
    net.adjust(errors, 0.5)
    assert all(np.isfinite(w).all() for w in net.weights)


def test_adjust_shifts_each_row_uniformly():
    net = Network([1, 1], weights=KNOWN_WEIGHTS)
    net.evaluate([0.5])
    errors = net.backpropagate([0.0, 1.0])
    before = net.weights[0]
    net.adjust(errors, 0.25)
    delta = net.weights[0] - before

    assert np.allclose(delta[0], 0.0)
    expected = 0.5 * errors[0][1] * 0.25
    assert np.allclose(delta[1], expected, atol=1e-6)
    assert delta[1][0] == pytest.approx(delta[1][1], abs=1e-6)


def test_adjust_requires_one_error_vector_per_matrix():
    net = Network([1, 1, 1], seed=0)
    net.evaluate([0.5])
    with pytest.raises(ValueError):
        net.adjust([np.zeros(2)], 0.1)
