"""Demo script: run a Phase-Based engagement and show each interceptor's mode timeline."""
from dataclasses import replace

import numpy as np

from intercept_sim import Strategy, create_default_config, run_engagement

config = replace(create_default_config(), target_maneuver_aoa_deg=10.0,
                 record_history=True)
result = run_engagement(config, Strategy.PHASE_BASED)

print("\n\n===== ENGAGEMENT RESULT =====")
print(f"Outcome: {result.outcome.name} ({result.termination_reason})")
print(f"Final time: {result.final_time:.2f}s")
if result.intercept_time is not None:
    print(f"Intercept: interceptor {result.intercepting_interceptor} "
          f"at t={result.intercept_time:.3f}s, miss {result.miss_distance:.1f} ft")
else:
    print(f"Closest approach: {result.miss_distance:.1f} ft")
if result.selected_case is not None:
    print(f"Maneuver detected at t={result.maneuver_detected_time:.2f}s, "
          f"selected {result.selected_case.name} at t={result.selection_time:.2f}s")
print(f"Total effort: {result.total_effort:.1f} ft/s")

log = result.history
times = np.array(log.time)
for i in range(config.num_interceptors):
    assignment = result.assignments[i]
    print()
    print(f"===== INTERCEPTOR {i} ({assignment.name if assignment else 'LIVE PIP'}) =====")
    print(f"Effort: {result.effort[i]:.1f} ft/s | Final mode: {result.final_modes[i].name}")
    print("Mode Timeline:")
    prev_mode = None
    for k in range(len(times)):
        mode = log.interceptor_mode[k][i]
        if mode != prev_mode:
            rng = log.interceptor_range[k][i]
            print(f"  t={times[k]:8.2f}s | Range={rng / 1000:9.2f} kft | Mode: {mode}")
            prev_mode = mode
