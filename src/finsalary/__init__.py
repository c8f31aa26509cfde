"""Finnish net-salary and tax breakdown calculator."""
