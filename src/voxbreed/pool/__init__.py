from voxbreed.pool.population import create_initial_population, breed_next_generation

__all__ = ['create_initial_population', 'breed_next_generation']
