"""
Signal engine: indicators, strategy evaluators and the orchestrator.

Modules
-------
indicators   : sma() + rsi() — pure numeric functions with sentinel values.
strategies   : turtle_signal() + scalping_signal() + orb_signal() — pure
               first-match-wins rule sets returning a Recommendation.
orchestrator : generate_signal() + SignalService — strategy dispatch,
               data-sufficiency guard, and the never-raise boundary.
"""
