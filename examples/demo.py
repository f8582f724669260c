import numpy as np
from firstream import StreamConfig, WeightVector, filter_file, read_raw, write_test_file

input_data_size = 1000
config = StreamConfig(block_size=100, halo_size=10, filter_length=10)

# Write out some random data for testing
write_test_file("test_in.dat", input_data_size, seed=0)

# 10-tap filter with reproducible random weights
weights = WeightVector.random(config.filter_length, seed=0)

# Stream test_in.dat → test_out.dat, one 100-sample block at a time
report = filter_file("test_in.dat", "test_out.dat", weights, config)
print(f"{report.n_blocks} blocks, {report.samples_written} samples written")

# Save weights for reuse
weights.to_npz("weights.npz")

y = read_raw("test_out.dat")
print("first outputs:", np.round(y[:5], 4))
