"""Backend services for the FinSalary calculator."""
