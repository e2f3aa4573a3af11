# tsp_framework
# Experiment harness: maps in, solver configs run, results CSV and LaTeX rows out.
