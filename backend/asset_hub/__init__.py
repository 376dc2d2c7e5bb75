"""Asset Hub backend: asset publication gate and billing reconciliation."""
