"""Metaprogramming based tooling for morphcore."""
