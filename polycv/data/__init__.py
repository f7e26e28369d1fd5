from polycv.data.dataset import Dataset
from polycv.data.loader import DataLoader
from polycv.data.synthetic import generate_bike_weather
