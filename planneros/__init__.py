"""PlannerOS API - event planning backend"""
