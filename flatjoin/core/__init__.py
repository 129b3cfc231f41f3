"""
Core API: relation configuration, predicates, row filters and the
sort -> join -> search front-end
"""
