"""Result-envelope API used by the presentation layer."""
