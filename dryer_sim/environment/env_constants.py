# Drying chamber ambient defaults
CHAMBER_AMBIENT_C = 25.0
CHAMBER_AMBIENT_RH = 65.0

# Steady-state effect of each actuator that is switched on
HEATER_RISE_C = 6.0          # per heater
HEATER_RH_DROP = 4.0         # per heater (warmer air holds more water)
DRYER_RH_DROP = 15.0
FAN_RH_DROP = 3.0            # per fan

# Ramp rates toward the steady state
TEMP_RAMP_C_PER_SEC = 0.05
TEMP_OFF_DRIFT_C_PER_SEC = 0.02
RH_RAMP_PCT_PER_SEC = 0.2

RH_MIN = 5.0
RH_MAX = 100.0
