"""Account service: user accounts, bearer credentials and the resilient request pipeline."""
