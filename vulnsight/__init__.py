"""VulnSight - simulated vulnerability scanning and a rule-based security assistant."""
