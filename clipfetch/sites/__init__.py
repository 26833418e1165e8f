"""Extractors for individual sites, one module per site."""