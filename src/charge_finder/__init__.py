"""Find cheap electricity price windows and plan force-charging ranges."""
