"""Product catalog service: search and manage catalog products over REST."""
