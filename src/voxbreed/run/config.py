import configparser
import os

class Config:

    # Names of all attributes holding a probability, validated on load
    _PROBABILITIES = ('node_add_probability',
                      'connection_add_probability',
                      'weight_mutate_probability',
                      'weight_perturb_prob',
                      'activation_mutate_probability',
                      'connection_toggle_probability',
                      'crossover_probability')

    # Names of all attributes which must be strictly positive
    _POSITIVE = ('connection_add_attempts',
                 'population_size',
                 'novelty_k',
                 'archive_max_size',
                 'explore_candidates',
                 'behavior_resolution',
                 'export_resolution',
                 'envelope_radius')

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config holding the default values.
                         Options missing from the file also take their default value.
        """
        self._set_defaults()

        if config_file is None:
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Helper function to safely parse values
        def get_value(section, key, value_type, default):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                return default

        # [MUTATION]

        self.node_add_probability          = get_value('MUTATION', 'node_add_probability'         , float, self.node_add_probability)
        self.connection_add_probability    = get_value('MUTATION', 'connection_add_probability'   , float, self.connection_add_probability)
        self.connection_add_attempts       = get_value('MUTATION', 'connection_add_attempts'      , int  , self.connection_add_attempts)
        self.weight_mutate_probability     = get_value('MUTATION', 'weight_mutate_probability'    , float, self.weight_mutate_probability)
        self.weight_perturb_prob           = get_value('MUTATION', 'weight_perturb_prob'          , float, self.weight_perturb_prob)
        self.weight_perturb_strength       = get_value('MUTATION', 'weight_perturb_strength'      , float, self.weight_perturb_strength)
        self.min_weight                    = get_value('MUTATION', 'min_weight'                   , float, self.min_weight)
        self.max_weight                    = get_value('MUTATION', 'max_weight'                   , float, self.max_weight)
        self.activation_mutate_probability = get_value('MUTATION', 'activation_mutate_probability', float, self.activation_mutate_probability)
        self.connection_toggle_probability = get_value('MUTATION', 'connection_toggle_probability', float, self.connection_toggle_probability)

        # [BREEDING]

        self.crossover_probability = get_value('BREEDING', 'crossover_probability', float, self.crossover_probability)
        self.initial_mutations     = get_value('BREEDING', 'initial_mutations'    , int  , self.initial_mutations)
        self.population_size       = get_value('BREEDING', 'population_size'      , int  , self.population_size)

        # [NOVELTY]

        self.novelty_k         = get_value('NOVELTY', 'k'        , int  , self.novelty_k)
        self.novelty_threshold = get_value('NOVELTY', 'threshold', float, self.novelty_threshold)
        self.archive_max_size  = get_value('NOVELTY', 'max_size' , int  , self.archive_max_size)
        self.explore_candidates = get_value('NOVELTY', 'explore_candidates', int, self.explore_candidates)

        # [BEHAVIOR]

        self.behavior_resolution = get_value('BEHAVIOR', 'resolution', int, self.behavior_resolution)

        # [VOLUME]

        self.iso_level         = get_value('VOLUME', 'iso_level'        , float, self.iso_level)
        self.export_resolution = get_value('VOLUME', 'export_resolution', int  , self.export_resolution)
        self.envelope_radius   = get_value('VOLUME', 'envelope_radius'  , float, self.envelope_radius)

        self._validate()

    def _set_defaults(self):

        # [MUTATION]

        # The probability that mutation will split an enabled connection with a new hidden node.
        self.node_add_probability = 0.03

        # The probability that mutation will add a connection between existing nodes,
        # and the number of random endpoint pairs tried before giving up.
        self.connection_add_probability = 0.05
        self.connection_add_attempts    = 20

        # The probability that mutation will touch the weights of the connections at all.
        self.weight_mutate_probability = 0.80

        # Once weights are mutated: the probability that a weight is perturbed by
        # gaussian noise (otherwise it is replaced), and the noise standard deviation.
        self.weight_perturb_prob     = 0.90
        self.weight_perturb_strength = 0.5

        # The range from which new random weights are drawn uniformly.
        # Perturbed weights are not clamped to this range.
        self.min_weight = -2.0
        self.max_weight =  2.0

        # The probability that mutation will reassign the activation of a hidden node.
        self.activation_mutate_probability = 0.05

        # The probability that mutation will flip the 'enabled' flag of a connection.
        self.connection_toggle_probability = 0.02

        # [BREEDING]

        # The probability that a non-elite child is produced by crossover (needs 2+ parents).
        self.crossover_probability = 0.4

        # The number of mutations applied to the seed genome for each initial individual.
        self.initial_mutations = 5

        # The number of genomes in each generation.
        self.population_size = 9

        # [NOVELTY]

        # The number of nearest neighbours averaged when computing sparseness.
        self.novelty_k = 15

        # Behaviors whose sparseness exceeds this threshold are admitted to the archive.
        self.novelty_threshold = 0.3

        # The maximum number of archived behaviors (oldest evicted first).
        self.archive_max_size = 500

        # The number of mutated candidates generated by an auto-explore action.
        self.explore_candidates = 20

        # [BEHAVIOR]

        # The side of the square grid sampled when extracting a behavior descriptor.
        self.behavior_resolution = 16

        # [VOLUME]

        # The scalar threshold separating solid from empty voxels.
        self.iso_level = 0.3

        # The number of voxels per axis used when exporting a volume.
        self.export_resolution = 50

        # Density fades to zero linearly between the origin and this radius.
        self.envelope_radius = 0.9

    def _validate(self):
        for name in self._PROBABILITIES:
            value = getattr(self, name)
            if value is None or not 0.0 <= value <= 1.0:
                raise ValueError(f"'{name}' must be a probability in [0, 1], got {value}")

        for name in self._POSITIVE:
            value = getattr(self, name)
            if value is None or value <= 0:
                raise ValueError(f"'{name}' must be strictly positive, got {value}")

        if self.min_weight > self.max_weight:
            raise ValueError(f"'min_weight' ({self.min_weight}) exceeds 'max_weight' ({self.max_weight})")

        # grid sampling needs at least two samples per axis
        for name in ('behavior_resolution', 'export_resolution'):
            if getattr(self, name) < 2:
                raise ValueError(f"'{name}' must be at least 2, got {getattr(self, name)}")

        if self.initial_mutations is None or self.initial_mutations < 0:
            raise ValueError(f"'initial_mutations' must be non-negative, got {self.initial_mutations}")
