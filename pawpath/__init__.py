"""PawPath: dog-friendly day plans on a map."""
