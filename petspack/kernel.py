"""
The numeric kernel: every Helmholtz energy expression in petspack is written against jax.numpy, such that the same code
gives values for floats, numpy arrays and Profiles, and exact derivatives through jax's automatic differentiation.

64-bit floats are enabled upon import, the default 32-bit floats are not accurate enough for thermodynamics.

Derivatives are evaluated in forward mode (jax.jvp) for a single variable, and in reverse mode (jax.vjp,
jax.value_and_grad) for many. Branches are written with jnp.where, where both sides must be finite for the derivative
to be finite: evaluate the unused side on a safe argument (see hardsphere._safe_n3).
"""
import numpy as np
import jax
import jax.numpy as jnp

jax.config.update('jax_enable_x64', True)


def first_derivative(f, x):
    """
    Evaluate f(x) and df/dx.

    Args:
        f (callable) : Function of one argument
        x (float or ndarray) : Point of evaluation. For arrays, the derivative is computed elementwise, so `f` must
                                act elementwise.
    Returns:
        tuple : f(x), df/dx
    """
    x = jnp.asarray(x, dtype=float)
    return jax.jvp(f, (x,), (jnp.ones_like(x),))


def second_derivative(f, x):
    """
    Evaluate f(x), df/dx and d^2f/dx^2, by forward mode differentiation of the first derivative.

    Args:
        f (callable) : Function of one argument
        x (float) : Point of evaluation
    Returns:
        tuple : f(x), df/dx, d^2f/dx^2
    """
    x = jnp.asarray(x, dtype=float)
    (fx, dfdx), (_, d2fdx2) = jax.jvp(lambda y: first_derivative(f, y), (x,), (jnp.ones_like(x),))
    return fx, dfdx, d2fdx2


def gradient(f, x):
    """
    Evaluate f(x) and its gradient, for a scalar valued `f` of a vector argument.

    Args:
        f (callable) : Function taking a 1d array
        x (Iterable[float]) : Point of evaluation
    Returns:
        tuple : f(x) (float), gradient (1d array)
    """
    fx, grad = jax.value_and_grad(f)(jnp.asarray(x, dtype=float))
    return float(fx), np.asarray(grad)


def pointwise_gradient(f, x):
    """
    Evaluate f(x[0], x[1], ...) and its derivative wrt. each argument, for a function `f` acting pointwise on arrays
    of equal shape, i.e. f(...)[j] only depends on x[0][j], x[1][j], ...

    Args:
        f (callable) : Function of len(x) arrays
        x (list[ndarray]) : Point of evaluation

    Returns:
        tuple : f(x) (ndarray), derivatives indexed as [<argument idx>][<point idx>] (list[ndarray])
    """
    fx, pullback = jax.vjp(f, *[jnp.asarray(xi, dtype=float) for xi in x])
    return np.asarray(fx), [np.asarray(d) for d in pullback(jnp.ones_like(fx))]
