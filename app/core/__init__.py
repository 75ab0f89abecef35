# Core package: error taxonomy, sign-in flow and dependency wiring.
