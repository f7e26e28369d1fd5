from polycv.reporting.plots import Visualizer
