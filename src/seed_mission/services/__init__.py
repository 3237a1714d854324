"""Domain services for proofs, hearts, members and communities."""
