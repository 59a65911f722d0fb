"""Feed-forward neural networks, trainers, a voting evaluator and a Q-learning agent."""