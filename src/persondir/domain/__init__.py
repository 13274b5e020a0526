"""Pure person-directory domain: query building, merging and source composition."""
