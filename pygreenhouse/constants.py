# pygreenhouse/constants.py

"""
Central repository for the physical constants and fixed model parameters of
the layered radiative-balance model.
"""

# --- Physical Constants (SI units) ---
SIGMA = 5.670374e-8  # Stefan-Boltzmann constant (W m^-2 K^-4)
ZERO_CELSIUS_K = 273.15  # 0 °C in Kelvin

# --- Source ---
# Mean solar input per unit area at the top of the atmosphere (W/m^2), i.e. the
# value that puts an airless black ground near the Earth's effective temperature.
OUTPUT_ENERGY_RATE = 343.6
OUTPUT_PROPORTION_RANGE = (0.5, 2.0)  # allowed range of the output multiplier

# --- Geometry & transport ---
HEIGHT_OF_ATMOSPHERE = 50_000.0  # top-of-atmosphere altitude (m)
PACKET_SPEED = 10_000.0  # vertical packet speed (m/s, model units)
SURFACE_AREA = 1.0  # horizontal area of every layer (m^2)
MAX_ATMOSPHERE_LAYERS = 3

# --- Thermal ---
GROUND_HEAT_CAPACITY = 120.0  # J/K for SURFACE_AREA
LAYER_HEAT_CAPACITY = 60.0  # J/K for SURFACE_AREA

# --- Numerics ---
NEGLIGIBLE_ENERGY = 1.0e-12  # J; smaller packet remainders are absorbed whole
TIME_EPSILON = 1.0e-9  # s; tolerance on accumulated window durations

# --- Qualitative temperature scale (lower bounds in K, see temperature.py) ---
TEMPERATURE_LEVEL_THRESHOLDS = (260.0, 275.0, 283.0, 288.0, 293.0, 301.0)
